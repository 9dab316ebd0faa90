"""WorkspaceService: workspaces and their memberships.

Creating a workspace writes the workspace, the owner's membership and the default category catalog in one batch.
Deleting a workspace removes its members, categories and transactions in one batch as well.
"""

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from budgetbook.core.db import (
    Base,
    CategoryRecord,
    MemberRecord,
    TransactionRecord,
    UserRecord,
    WorkspaceRecord,
    storage_operation,
)
from budgetbook.core.errors import MemberNotFoundError, OwnerRoleError, PlanLimitError
from budgetbook.core.models import (
    PLAN_LIMITS,
    PlanLimits,
    SubscriptionPlan,
    Workspace,
    WorkspaceInput,
    WorkspaceMember,
    WorkspaceType,
    WorkspaceUpdate,
)
from budgetbook.core.permissions import InvalidRoleError, MemberRole, parse_role, sort_members
from budgetbook.core.utils import get_logger, new_id, utcnow
from budgetbook.services.category_service import build_default_category_records

logger = get_logger("budgetbook.workspaces")


def member_id(workspace_id: str, uid: str) -> str:
    """Return the document id of a membership."""
    return f"{workspace_id}_{uid}"


def _stored_role(record: MemberRecord) -> MemberRole | None:
    try:
        return parse_role(record.role)
    except InvalidRoleError:
        logger.warning(f"Ignoring membership {record.id} with unknown role {record.role!r}")
        return None


class WorkspaceService:
    """Service for workspace and membership documents."""

    def __init__(self, session: Session) -> None:
        """Initialize the WorkspaceService with a SQLAlchemy session."""
        self.session = session

    def plan_limits(self, uid: str) -> PlanLimits:
        """Return the plan limits of a user. Unknown users get the free plan."""
        with storage_operation(self.session, "reading user plan"):
            user = self.session.get(UserRecord, uid)
        plan = SubscriptionPlan(user.plan) if user else SubscriptionPlan.FREE
        return PLAN_LIMITS[plan]

    def build_workspace(self, owner_id: str, data: WorkspaceInput, currency: str = "ILS") -> tuple[str, list[Base]]:
        """Check the owner's plan and build the unsaved records of a new workspace.

        The records are the workspace, the owner's membership and the default category catalog. Callers add them to
        the session and commit them together with any other documents of the same batch.
        """
        limits = self.plan_limits(owner_id)
        if data.type == WorkspaceType.BUSINESS and not limits.can_use_business_workspace:
            msg = "Business workspaces are not available on this plan"
            raise PlanLimitError(msg)
        owned = self._count(
            select(func.count()).select_from(WorkspaceRecord).where(WorkspaceRecord.owner_id == owner_id)
        )
        if owned >= limits.max_workspaces:
            msg = f"Workspace limit reached ({limits.max_workspaces})"
            raise PlanLimitError(msg)

        workspace_id = new_id()
        now = utcnow()
        workspace = WorkspaceRecord(
            id=workspace_id,
            name=data.name,
            type=data.type.value,
            owner_id=owner_id,
            currency=currency,
            icon=data.icon,
            color=data.color,
            created_at=now,
            updated_at=now,
        )
        owner = MemberRecord(
            id=member_id(workspace_id, owner_id),
            workspace_id=workspace_id,
            uid=owner_id,
            role=MemberRole.OWNER.value,
            added_at=now,
        )
        return workspace_id, [workspace, owner, *build_default_category_records(workspace_id)]

    def create_workspace(self, owner_id: str, data: WorkspaceInput, currency: str = "ILS") -> str:
        """Create a workspace owned by ``owner_id``, seeded with the default categories, and return its id."""
        workspace_id, records = self.build_workspace(owner_id, data, currency)
        with storage_operation(self.session, "creating workspace", commit=True):
            self.session.add_all(records)
        logger.info(f"Created {data.type.value} workspace {workspace_id} for user {owner_id}")
        return workspace_id

    def get_workspace(self, workspace_id: str) -> Workspace | None:
        """Return a workspace, or None."""
        with storage_operation(self.session, "reading workspace"):
            record = self.session.get(WorkspaceRecord, workspace_id)
        return Workspace.model_validate(record) if record else None

    def list_user_workspaces(self, uid: str) -> list[Workspace]:
        """Return the workspaces a user belongs to, most recently updated first."""
        stmt = (
            select(WorkspaceRecord)
            .join(MemberRecord, MemberRecord.workspace_id == WorkspaceRecord.id)
            .where(MemberRecord.uid == uid)
            .order_by(WorkspaceRecord.updated_at.desc())
        )
        with storage_operation(self.session, "listing workspaces"):
            records = self.session.scalars(stmt).all()
        return [Workspace.model_validate(record) for record in records]

    def update_workspace(self, workspace_id: str, data: WorkspaceUpdate) -> bool:
        """Apply a partial update. Returns False when the workspace does not exist."""
        with storage_operation(self.session, "updating workspace", commit=True):
            record = self.session.get(WorkspaceRecord, workspace_id)
            if record is None:
                return False
            for key, value in data.model_dump(exclude_unset=True).items():
                if value is None and key == "name":
                    continue
                setattr(record, key, value)
            record.updated_at = utcnow()
        return True

    def delete_workspace(self, workspace_id: str) -> None:
        """Delete a workspace with all of its members, categories and transactions in one batch."""
        with storage_operation(self.session, "deleting workspace", commit=True):
            self.session.execute(delete(MemberRecord).where(MemberRecord.workspace_id == workspace_id))
            self.session.execute(delete(CategoryRecord).where(CategoryRecord.workspace_id == workspace_id))
            self.session.execute(delete(TransactionRecord).where(TransactionRecord.workspace_id == workspace_id))
            self.session.execute(
                update(UserRecord)
                .where(UserRecord.default_workspace_id == workspace_id)
                .values(default_workspace_id=None)
            )
            self.session.execute(delete(WorkspaceRecord).where(WorkspaceRecord.id == workspace_id))
        logger.info(f"Deleted workspace {workspace_id} and all of its documents")

    def add_member(self, workspace: Workspace, email: str, role: MemberRole) -> str:
        """Add the user with ``email`` to a workspace (or change their role) and return their uid.

        The owner cannot be re-added under another role and nobody can be added as a second owner.
        """
        if role == MemberRole.OWNER:
            msg = "A workspace has exactly one owner"
            raise OwnerRoleError(msg)
        with storage_operation(self.session, "looking up member"):
            user = self.session.scalars(select(UserRecord).where(UserRecord.email == email)).first()
        if user is None:
            msg = f"No user with email {email}"
            raise MemberNotFoundError(msg)
        if user.uid == workspace.owner_id:
            msg = "The owner's role cannot be changed"
            raise OwnerRoleError(msg)

        with storage_operation(self.session, "reading membership"):
            existing = self.session.get(MemberRecord, member_id(workspace.id, user.uid))
        if existing is None:
            limits = self.plan_limits(workspace.owner_id)
            members = self._count(
                select(func.count()).select_from(MemberRecord).where(MemberRecord.workspace_id == workspace.id)
            )
            if members >= limits.max_members:
                msg = f"Member limit reached ({limits.max_members})"
                raise PlanLimitError(msg)

        with storage_operation(self.session, "adding member", commit=True):
            if existing is None:
                self.session.add(
                    MemberRecord(
                        id=member_id(workspace.id, user.uid),
                        workspace_id=workspace.id,
                        uid=user.uid,
                        role=role.value,
                        added_at=utcnow(),
                    )
                )
            else:
                existing.role = role.value
        logger.info(f"User {user.uid} joined workspace {workspace.id} as {role.value}")
        return user.uid

    def list_members(self, workspace_id: str) -> list[WorkspaceMember]:
        """Return the members of a workspace ordered owner, admin, member, viewer."""
        stmt = (
            select(MemberRecord, UserRecord)
            .outerjoin(UserRecord, UserRecord.uid == MemberRecord.uid)
            .where(MemberRecord.workspace_id == workspace_id)
            .order_by(MemberRecord.added_at.asc())
        )
        with storage_operation(self.session, "listing members"):
            rows = self.session.execute(stmt).all()
        members = []
        for member, user in rows:
            role = _stored_role(member)
            if role is None:
                continue
            members.append(
                WorkspaceMember(
                    uid=member.uid,
                    email=user.email if user else "",
                    display_name=user.display_name if user else None,
                    role=role,
                    added_at=member.added_at,
                )
            )
        return sort_members(members)

    def update_member_role(self, workspace_id: str, uid: str, role: MemberRole) -> bool:
        """Change a member's role. Returns False when the membership does not exist."""
        with storage_operation(self.session, "updating member role", commit=True):
            record = self.session.get(MemberRecord, member_id(workspace_id, uid))
            if record is None:
                return False
            record.role = role.value
        return True

    def remove_member(self, workspace_id: str, uid: str) -> bool:
        """Remove a member. Returns False when the membership does not exist."""
        with storage_operation(self.session, "removing member", commit=True):
            record = self.session.get(MemberRecord, member_id(workspace_id, uid))
            if record is None:
                return False
            self.session.delete(record)
        logger.info(f"Removed user {uid} from workspace {workspace_id}")
        return True

    def has_workspace_access(self, workspace_id: str, uid: str) -> bool:
        """Return whether the user is a member of the workspace."""
        return self.get_user_role(workspace_id, uid) is not None

    def get_user_role(self, workspace_id: str, uid: str) -> MemberRole | None:
        """Return the user's role in the workspace, or None for non-members."""
        with storage_operation(self.session, "reading membership"):
            record = self.session.get(MemberRecord, member_id(workspace_id, uid))
        return _stored_role(record) if record else None

    def _count(self, stmt: object) -> int:
        with storage_operation(self.session, "counting documents"):
            return self.session.scalar(stmt) or 0
