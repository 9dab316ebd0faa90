"""FastAPI dependencies for DI (settings, DB session, services, caller identity, workspace selection).

Identity and workspace selection are resolved here once per request and handed to the endpoints as explicit
``CurrentUser`` and ``WorkspaceContext`` values.
"""

from collections.abc import Callable

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from budgetbook.core.db import get_db
from budgetbook.core.models import CurrentUser, WorkspaceContext
from budgetbook.core.permissions import Action, can_perform_action
from budgetbook.core.settings import Settings, get_settings
from budgetbook.services.category_service import CategoryService
from budgetbook.services.dashboard_service import DashboardService
from budgetbook.services.transaction_service import TransactionService
from budgetbook.services.user_service import UserService
from budgetbook.services.workspace_service import WorkspaceService


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Provide a UserService bound to the request session."""
    return UserService(db)


def get_workspace_service(db: Session = Depends(get_db)) -> WorkspaceService:
    """Provide a WorkspaceService bound to the request session."""
    return WorkspaceService(db)


def get_category_service(db: Session = Depends(get_db)) -> CategoryService:
    """Provide a CategoryService bound to the request session."""
    return CategoryService(db)


def get_transaction_service(db: Session = Depends(get_db)) -> TransactionService:
    """Provide a TransactionService bound to the request session."""
    return TransactionService(db)


def get_dashboard_service(
    categories: CategoryService = Depends(get_category_service),
    transactions: TransactionService = Depends(get_transaction_service),
) -> DashboardService:
    """Provide a DashboardService over the request's category and transaction services."""
    return DashboardService(categories, transactions)


def get_current_user(
    x_user_id: str | None = Header(default=None),
    x_user_email: str | None = Header(default=None),
    x_user_name: str | None = Header(default=None),
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
) -> CurrentUser:
    """Resolve the identity asserted by the identity provider, creating the profile on first login."""
    if not x_user_id:
        raise HTTPException(401, "Missing user identity")
    identity = CurrentUser(uid=x_user_id, email=x_user_email or "", display_name=x_user_name)
    users.ensure_user(identity, settings.default_currency)
    return identity


def get_workspace_context(
    workspace_id: str,
    user: CurrentUser = Depends(get_current_user),
    workspaces: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceContext:
    """Resolve the workspace named in the path together with the caller's role in it."""
    workspace = workspaces.get_workspace(workspace_id)
    if workspace is None:
        raise HTTPException(404, "Workspace not found")
    role = workspaces.get_user_role(workspace_id, user.uid)
    if role is None:
        raise HTTPException(403, "Not a member of this workspace")
    return WorkspaceContext(user=user, workspace=workspace, role=role)


def require_action(action: Action) -> Callable[..., WorkspaceContext]:
    """Build a dependency that admits only members whose role permits ``action``."""

    def dependency(context: WorkspaceContext = Depends(get_workspace_context)) -> WorkspaceContext:
        if not can_perform_action(context.role, action):
            raise HTTPException(403, f"Role '{context.role.value}' may not {action.value}")
        return context

    return dependency
