"""Core package: provides models, the filter and aggregation engine, formatting, access policy, storage and settings."""

from .calculations import compute_category_breakdown, compute_monthly_summary, filter_transactions  # noqa: F401
from .db import get_db  # noqa: F401
from .models import CategorySummary, MonthlySummary, Transaction, TransactionFilters  # noqa: F401
from .permissions import Action, MemberRole, can_perform_action  # noqa: F401
from .settings import Settings  # noqa: F401
