"""Monthly dashboard: fetch a month of data and run the aggregation engine over it."""

from budgetbook.core.calculations import compute_category_breakdown, compute_monthly_summary, get_month_range
from budgetbook.core.models import MonthlyDashboard, TransactionType
from budgetbook.core.utils import get_logger
from budgetbook.services.category_service import CategoryService
from budgetbook.services.transaction_service import TransactionService

logger = get_logger("budgetbook.dashboard")


class DashboardService:
    """Builds monthly summaries from the category and transaction services."""

    def __init__(self, categories: CategoryService, transactions: TransactionService) -> None:
        """Initialize the DashboardService with its collaborating services."""
        self.categories = categories
        self.transactions = transactions

    def monthly_dashboard(self, workspace_id: str, year: int, month: int) -> MonthlyDashboard:
        """Compute the summary and both category breakdowns of one calendar month (1-12).

        Every transaction of the month is fetched. A failed fetch raises StorageError; it never yields zeros.
        """
        start, end = get_month_range(year, month)
        transactions = self.transactions.list_transactions(workspace_id, start, end, limit=None)
        categories = self.categories.list_categories(workspace_id)
        logger.info(
            f"Aggregating {len(transactions)} transactions over {len(categories)} categories "
            f"for workspace {workspace_id}, {year}-{month:02d}"
        )
        return MonthlyDashboard(
            year=year,
            month=month,
            summary=compute_monthly_summary(transactions, categories),
            income_breakdown=compute_category_breakdown(transactions, categories, TransactionType.INCOME),
            expense_breakdown=compute_category_breakdown(transactions, categories, TransactionType.EXPENSE),
        )
