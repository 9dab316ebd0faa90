"""Services package: storage-backed operations on users, workspaces, categories and transactions."""

from .category_service import CategoryService  # noqa: F401
from .dashboard_service import DashboardService  # noqa: F401
from .transaction_service import TransactionService  # noqa: F401
from .user_service import UserService  # noqa: F401
from .workspace_service import WorkspaceService  # noqa: F401
