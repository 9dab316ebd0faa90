"""Filtering and aggregation of transactions.

Every function in this module is pure: it takes already-fetched snapshots of transactions and categories and returns
new values without touching the store. Incomplete data is handled by defaulting, never by raising:

- a transaction whose category is missing from the catalog is excluded by a category group filter, counted as a
  variable expense in the monthly summary, and absent from every per-category row of a breakdown;
- zero income yields a savings rate of 0 and a zero type total yields percentages of 0.
"""

import calendar
from collections.abc import Iterable, Sequence
from datetime import date

from budgetbook.core.models import (
    Category,
    CategoryGroup,
    CategorySummary,
    MonthlySummary,
    Transaction,
    TransactionFilters,
    TransactionType,
)


def _matches_search(tx: Transaction, needle: str) -> bool:
    if needle in tx.description.lower():
        return True
    return tx.notes is not None and needle in tx.notes.lower()


def filter_transactions(
    transactions: Iterable[Transaction],
    filters: TransactionFilters,
    categories: Iterable[Category] = (),
) -> list[Transaction]:
    """Return the transactions satisfying every option present in ``filters``, in input order."""
    filtered = list(transactions)

    if filters.type is not None:
        filtered = [tx for tx in filtered if tx.type == filters.type]

    if filters.category_id is not None:
        filtered = [tx for tx in filtered if tx.category_id == filters.category_id]

    if filters.category_group is not None:
        group_ids = {cat.id for cat in categories if cat.group == filters.category_group}
        filtered = [tx for tx in filtered if tx.category_id in group_ids]

    if filters.start_date is not None:
        filtered = [tx for tx in filtered if tx.date >= filters.start_date]
    if filters.end_date is not None:
        filtered = [tx for tx in filtered if tx.date <= filters.end_date]

    if filters.min_amount is not None:
        filtered = [tx for tx in filtered if tx.amount >= filters.min_amount]
    if filters.max_amount is not None:
        filtered = [tx for tx in filtered if tx.amount <= filters.max_amount]

    if filters.search_text:
        needle = filters.search_text.lower()
        filtered = [tx for tx in filtered if _matches_search(tx, needle)]

    if filters.tags:
        wanted = set(filters.tags)
        filtered = [tx for tx in filtered if wanted.intersection(tx.tags)]

    return filtered


def compute_monthly_summary(transactions: Iterable[Transaction], categories: Iterable[Category]) -> MonthlySummary:
    """Compute income, expenses, balance, savings rate and the fixed/variable expense split.

    Variable expenses are derived as ``expenses - fixed_expenses``, so expenses in categories that are no longer in
    the catalog count as variable.
    """
    transactions = list(transactions)
    income = sum(tx.amount for tx in transactions if tx.type == TransactionType.INCOME)
    expenses = sum(tx.amount for tx in transactions if tx.type == TransactionType.EXPENSE)

    fixed_ids = {
        cat.id for cat in categories if cat.type == TransactionType.EXPENSE and cat.group == CategoryGroup.FIXED
    }
    fixed_expenses = sum(
        tx.amount for tx in transactions if tx.type == TransactionType.EXPENSE and tx.category_id in fixed_ids
    )

    balance = income - expenses
    savings_rate = (balance / income) * 100 if income > 0 else 0

    return MonthlySummary(
        income=income,
        expenses=expenses,
        balance=balance,
        savings_rate=savings_rate,
        fixed_expenses=fixed_expenses,
        variable_expenses=expenses - fixed_expenses,
    )


def compute_category_breakdown(
    transactions: Iterable[Transaction],
    categories: Sequence[Category],
    tx_type: TransactionType,
) -> list[CategorySummary]:
    """Compute per-category totals and shares for one transaction type, largest total first.

    Every catalog category of the type is listed, including those without transactions. Percentages are taken
    against the total of *all* transactions of the type, so transactions whose category is missing from the catalog
    raise the denominator without appearing in any row, and the row totals can sum to less than the grand total.
    Categories with equal totals keep their catalog order.
    """
    relevant_categories = [cat for cat in categories if cat.type == tx_type]
    relevant_transactions = [tx for tx in transactions if tx.type == tx_type]
    total_amount = sum(tx.amount for tx in relevant_transactions)

    breakdown = []
    for category in relevant_categories:
        matching = [tx for tx in relevant_transactions if tx.category_id == category.id]
        total = sum(tx.amount for tx in matching)
        breakdown.append(
            CategorySummary(
                category_id=category.id,
                category_label=category.label,
                category_icon=category.icon,
                category_color=category.color,
                total=total,
                target=category.target_monthly,
                percentage=(total / total_amount) * 100 if total_amount > 0 else 0,
                transaction_count=len(matching),
            )
        )

    return sorted(breakdown, key=lambda row: row.total, reverse=True)


def get_month_range(year: int, month: int) -> tuple[date, date]:
    """Return the first and last calendar day of a month (1-12)."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def current_month_year(today: date | None = None) -> tuple[int, int]:
    """Return ``(year, month)`` for today, or for the given date."""
    today = today or date.today()
    return today.year, today.month
