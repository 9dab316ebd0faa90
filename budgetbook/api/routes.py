"""FastAPI endpoints for the caller's profile, workspaces and workspace members.

This module defines the health check, the profile endpoints and workspace/membership management, and mounts the
category, transaction and report routers. Mutations answer with identifiers only; clients re-query for new state.
"""

from fastapi import APIRouter, Depends, HTTPException, Response

from budgetbook.api.categories import router as categories_router
from budgetbook.api.dependencies import (
    get_current_user,
    get_user_service,
    get_workspace_service,
    require_action,
)
from budgetbook.api.reports import router as reports_router
from budgetbook.api.transactions import router as transactions_router
from budgetbook.core.models import (
    CurrentUser,
    MemberInput,
    MemberRoleUpdate,
    User,
    UserUpdate,
    Workspace,
    WorkspaceContext,
    WorkspaceInput,
    WorkspaceMember,
    WorkspaceUpdate,
)
from budgetbook.core.permissions import Action, MemberRole
from budgetbook.core.settings import Settings, get_settings
from budgetbook.core.utils import get_logger
from budgetbook.services.user_service import UserService
from budgetbook.services.workspace_service import WorkspaceService

router = APIRouter()
logger = get_logger("budgetbook.api")


@router.get(
    "/health",
    summary="Health check",
    description="Simple health check endpoint. Returns status ok.",
    response_description="Status ok.",
    responses={200: {"description": "API is healthy.", "content": {"application/json": {"example": {"status": "ok"}}}}},
)
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


@router.get("/me", response_model=User, summary="Get the caller's profile")
def get_me(user: CurrentUser = Depends(get_current_user), users: UserService = Depends(get_user_service)) -> User:
    """Return the caller's profile."""
    profile = users.get_user(user.uid)
    if profile is None:
        raise HTTPException(404, "User not found")
    return profile


@router.patch("/me", status_code=204, summary="Update the caller's profile")
def update_me(
    payload: UserUpdate,
    user: CurrentUser = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
    workspaces: WorkspaceService = Depends(get_workspace_service),
) -> Response:
    """Update display fields or switch the default workspace."""
    if payload.default_workspace_id and not workspaces.has_workspace_access(payload.default_workspace_id, user.uid):
        raise HTTPException(403, "Not a member of this workspace")
    users.update_user_profile(user.uid, payload)
    return Response(status_code=204)


@router.get("/workspaces", response_model=list[Workspace], summary="List the caller's workspaces")
def list_workspaces(
    user: CurrentUser = Depends(get_current_user),
    workspaces: WorkspaceService = Depends(get_workspace_service),
) -> list[Workspace]:
    """Return the workspaces the caller belongs to, most recently updated first."""
    return workspaces.list_user_workspaces(user.uid)


@router.post(
    "/workspaces",
    status_code=201,
    summary="Create a workspace",
    description=(
        "Create a workspace owned by the caller. The default category catalog is seeded in the same batch.\n\n"
        "**Response:**\n"
        "- 201 Created: `{ 'id': '<workspace id>' }`.\n"
        "- 403 Forbidden: The caller's plan does not allow another workspace of this type."
    ),
)
def create_workspace(
    payload: WorkspaceInput,
    user: CurrentUser = Depends(get_current_user),
    workspaces: WorkspaceService = Depends(get_workspace_service),
    settings: Settings = Depends(get_settings),
) -> dict:
    """Create a workspace and return its id."""
    workspace_id = workspaces.create_workspace(user.uid, payload, settings.default_currency)
    return {"id": workspace_id}


@router.get("/workspaces/{workspace_id}", response_model=Workspace, summary="Get a workspace")
def get_workspace(context: WorkspaceContext = Depends(require_action(Action.VIEW))) -> Workspace:
    """Return the selected workspace."""
    return context.workspace


@router.patch("/workspaces/{workspace_id}", status_code=204, summary="Update a workspace")
def update_workspace(
    payload: WorkspaceUpdate,
    context: WorkspaceContext = Depends(require_action(Action.EDIT)),
    workspaces: WorkspaceService = Depends(get_workspace_service),
) -> Response:
    """Rename or restyle the workspace."""
    workspaces.update_workspace(context.workspace.id, payload)
    return Response(status_code=204)


@router.delete(
    "/workspaces/{workspace_id}",
    status_code=204,
    summary="Delete a workspace",
    description="Delete the workspace together with all of its members, categories and transactions, atomically.",
)
def delete_workspace(
    context: WorkspaceContext = Depends(require_action(Action.DELETE)),
    workspaces: WorkspaceService = Depends(get_workspace_service),
) -> Response:
    """Delete the workspace and everything it owns."""
    logger.info(f"User {context.user.uid} deleting workspace {context.workspace.id}")
    workspaces.delete_workspace(context.workspace.id)
    return Response(status_code=204)


@router.get("/workspaces/{workspace_id}/members", response_model=list[WorkspaceMember], summary="List members")
def list_members(
    context: WorkspaceContext = Depends(require_action(Action.VIEW)),
    workspaces: WorkspaceService = Depends(get_workspace_service),
) -> list[WorkspaceMember]:
    """Return the members ordered owner, admin, member, viewer."""
    return workspaces.list_members(context.workspace.id)


@router.post("/workspaces/{workspace_id}/members", status_code=201, summary="Add a member by email")
def add_member(
    payload: MemberInput,
    context: WorkspaceContext = Depends(require_action(Action.MANAGE_MEMBERS)),
    workspaces: WorkspaceService = Depends(get_workspace_service),
) -> dict:
    """Add a registered user to the workspace and return their uid."""
    if payload.role == MemberRole.OWNER:
        raise HTTPException(400, "A workspace has exactly one owner")
    uid = workspaces.add_member(context.workspace, payload.email, payload.role)
    return {"uid": uid}


@router.patch("/workspaces/{workspace_id}/members/{uid}", status_code=204, summary="Change a member's role")
def update_member_role(
    uid: str,
    payload: MemberRoleUpdate,
    context: WorkspaceContext = Depends(require_action(Action.MANAGE_MEMBERS)),
    workspaces: WorkspaceService = Depends(get_workspace_service),
) -> Response:
    """Change the role of a member other than the owner."""
    if uid == context.workspace.owner_id or payload.role == MemberRole.OWNER:
        raise HTTPException(400, "The owner's role cannot be changed")
    if not workspaces.update_member_role(context.workspace.id, uid, payload.role):
        raise HTTPException(404, "Member not found")
    return Response(status_code=204)


@router.delete("/workspaces/{workspace_id}/members/{uid}", status_code=204, summary="Remove a member")
def remove_member(
    uid: str,
    context: WorkspaceContext = Depends(require_action(Action.MANAGE_MEMBERS)),
    workspaces: WorkspaceService = Depends(get_workspace_service),
) -> Response:
    """Remove a member other than the owner."""
    if uid == context.workspace.owner_id:
        raise HTTPException(400, "The owner cannot be removed")
    if not workspaces.remove_member(context.workspace.id, uid):
        raise HTTPException(404, "Member not found")
    return Response(status_code=204)


router.include_router(categories_router)
router.include_router(transactions_router)
router.include_router(reports_router)
