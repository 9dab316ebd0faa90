"""Tests for transaction filtering."""

from datetime import date

import pytest
from conftest import make_category, make_transaction

from budgetbook.core.calculations import filter_transactions
from budgetbook.core.models import CategoryGroup, TransactionFilters, TransactionType

CATEGORIES = [
    make_category("rent", "expense", "fixed"),
    make_category("food", "expense", "variable"),
    make_category("salary", "income", "fixed"),
]

TRANSACTIONS = [
    make_transaction("t1", 4000, "rent", on=date(2025, 3, 1), tags=["home"]),
    make_transaction("t2", 120, "food", on=date(2025, 3, 5), description="Supermarket", notes="Weekly SHOPPING"),
    make_transaction("t3", 10000, "salary", "income", on=date(2025, 3, 10)),
    make_transaction("t4", 0, "food", on=date(2025, 3, 20), tags=["kids", "home"]),
    make_transaction("t5", 75, "gone", on=date(2025, 3, 31), description="Old gym"),
]


def ids(transactions: list) -> list[str]:
    """Return the ids of a transaction list."""
    return [tx.id for tx in transactions]


def test_no_filters_returns_everything_in_order() -> None:
    """An empty filter set keeps every transaction in input order."""
    result = filter_transactions(TRANSACTIONS, TransactionFilters(), CATEGORIES)
    if ids(result) != ["t1", "t2", "t3", "t4", "t5"]:
        msg = f"Expected all transactions, got {ids(result)}"
        raise AssertionError(msg)


def test_filter_by_type() -> None:
    """Only transactions of the requested type are kept."""
    result = filter_transactions(TRANSACTIONS, TransactionFilters(type=TransactionType.INCOME), CATEGORIES)
    if ids(result) != ["t3"]:
        msg = f"Expected ['t3'], got {ids(result)}"
        raise AssertionError(msg)


def test_filter_by_category() -> None:
    """Only transactions of the requested category are kept."""
    result = filter_transactions(TRANSACTIONS, TransactionFilters(category_id="food"), CATEGORIES)
    if ids(result) != ["t2", "t4"]:
        msg = f"Expected ['t2', 't4'], got {ids(result)}"
        raise AssertionError(msg)


def test_category_group_excludes_orphans() -> None:
    """Transactions whose category is missing from the catalog fail any group filter."""
    variable = filter_transactions(TRANSACTIONS, TransactionFilters(category_group=CategoryGroup.VARIABLE), CATEGORIES)
    if ids(variable) != ["t2", "t4"]:
        msg = f"Expected ['t2', 't4'], got {ids(variable)}"
        raise AssertionError(msg)
    fixed = filter_transactions(TRANSACTIONS, TransactionFilters(category_group=CategoryGroup.FIXED), CATEGORIES)
    if ids(fixed) != ["t1", "t3"]:
        msg = f"Expected ['t1', 't3'], got {ids(fixed)}"
        raise AssertionError(msg)


def test_category_group_without_catalog_matches_nothing() -> None:
    """With no catalog supplied, a group filter keeps nothing."""
    result = filter_transactions(TRANSACTIONS, TransactionFilters(category_group=CategoryGroup.FIXED))
    if result:
        msg = f"Expected no transactions, got {ids(result)}"
        raise AssertionError(msg)


def test_date_bounds_are_inclusive() -> None:
    """Transactions on the start and end dates are kept."""
    filters = TransactionFilters(start_date=date(2025, 3, 5), end_date=date(2025, 3, 20))
    result = filter_transactions(TRANSACTIONS, filters, CATEGORIES)
    if ids(result) != ["t2", "t3", "t4"]:
        msg = f"Expected ['t2', 't3', 't4'], got {ids(result)}"
        raise AssertionError(msg)


def test_amount_bounds_are_inclusive() -> None:
    """Amounts equal to the bounds are kept."""
    filters = TransactionFilters(min_amount=75, max_amount=4000)
    result = filter_transactions(TRANSACTIONS, filters, CATEGORIES)
    if ids(result) != ["t1", "t2", "t5"]:
        msg = f"Expected ['t1', 't2', 't5'], got {ids(result)}"
        raise AssertionError(msg)


def test_zero_amount_bounds_are_applied() -> None:
    """A bound of 0 is a real constraint, not an absent option."""
    result = filter_transactions(TRANSACTIONS, TransactionFilters(max_amount=0), CATEGORIES)
    if ids(result) != ["t4"]:
        msg = f"Expected ['t4'], got {ids(result)}"
        raise AssertionError(msg)
    result = filter_transactions(TRANSACTIONS, TransactionFilters(min_amount=0), CATEGORIES)
    if len(result) != len(TRANSACTIONS):
        msg = f"Expected every transaction with min_amount=0, got {ids(result)}"
        raise AssertionError(msg)


def test_search_matches_description_and_notes_case_insensitively() -> None:
    """Search text matches a substring of the description or the notes, ignoring case."""
    by_notes = filter_transactions(TRANSACTIONS, TransactionFilters(search_text="shopping"), CATEGORIES)
    if ids(by_notes) != ["t2"]:
        msg = f"Expected ['t2'], got {ids(by_notes)}"
        raise AssertionError(msg)
    by_description = filter_transactions(TRANSACTIONS, TransactionFilters(search_text="GYM"), CATEGORIES)
    if ids(by_description) != ["t5"]:
        msg = f"Expected ['t5'], got {ids(by_description)}"
        raise AssertionError(msg)


def test_search_skips_absent_notes() -> None:
    """Transactions without notes are matched on the description only."""
    result = filter_transactions(TRANSACTIONS, TransactionFilters(search_text="weekly"), CATEGORIES)
    if ids(result) != ["t2"]:
        msg = f"Expected ['t2'], got {ids(result)}"
        raise AssertionError(msg)


def test_tags_match_any() -> None:
    """A transaction is kept when it carries at least one of the requested tags."""
    result = filter_transactions(TRANSACTIONS, TransactionFilters(tags=["kids", "travel"]), CATEGORIES)
    if ids(result) != ["t4"]:
        msg = f"Expected ['t4'], got {ids(result)}"
        raise AssertionError(msg)
    result = filter_transactions(TRANSACTIONS, TransactionFilters(tags=["home"]), CATEGORIES)
    if ids(result) != ["t1", "t4"]:
        msg = f"Expected ['t1', 't4'], got {ids(result)}"
        raise AssertionError(msg)


@pytest.mark.parametrize("filters", [TransactionFilters(search_text=""), TransactionFilters(tags=[])])
def test_empty_text_and_tags_impose_no_constraint(filters: TransactionFilters) -> None:
    """Empty search text and an empty tag list keep every transaction."""
    result = filter_transactions(TRANSACTIONS, filters, CATEGORIES)
    if len(result) != len(TRANSACTIONS):
        msg = f"Expected every transaction, got {ids(result)}"
        raise AssertionError(msg)


@pytest.mark.parametrize(
    ("first", "second"),
    [
        ({"type": TransactionType.EXPENSE}, {"min_amount": 100}),
        ({"category_group": CategoryGroup.VARIABLE}, {"tags": ["home"]}),
        ({"start_date": date(2025, 3, 2)}, {"search_text": "tx"}),
        ({"category_id": "food"}, {"end_date": date(2025, 3, 10)}),
    ],
)
def test_options_combine_as_conjunction(first: dict, second: dict) -> None:
    """Applying two options together equals applying them one after the other."""
    combined = filter_transactions(TRANSACTIONS, TransactionFilters(**first, **second), CATEGORIES)
    sequential = filter_transactions(
        filter_transactions(TRANSACTIONS, TransactionFilters(**first), CATEGORIES),
        TransactionFilters(**second),
        CATEGORIES,
    )
    if ids(combined) != ids(sequential):
        msg = f"Combined {ids(combined)} differs from sequential {ids(sequential)}"
        raise AssertionError(msg)


def test_filtering_is_idempotent() -> None:
    """Filtering an already filtered list with the same options changes nothing."""
    filters = TransactionFilters(type=TransactionType.EXPENSE, max_amount=500)
    once = filter_transactions(TRANSACTIONS, filters, CATEGORIES)
    twice = filter_transactions(once, filters, CATEGORIES)
    if ids(once) != ids(twice):
        msg = f"Expected {ids(once)}, got {ids(twice)}"
        raise AssertionError(msg)
