"""UserService: profiles of users authenticated by the identity provider."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from budgetbook.core.db import UserRecord, storage_operation
from budgetbook.core.models import CurrentUser, SubscriptionPlan, User, UserUpdate, WorkspaceInput, WorkspaceType
from budgetbook.core.utils import get_logger, utcnow
from budgetbook.services.workspace_service import WorkspaceService

DEFAULT_WORKSPACE_NAME = "המרחב שלי"

logger = get_logger("budgetbook.users")


class UserService:
    """Service for user profile documents."""

    def __init__(self, session: Session) -> None:
        """Initialize the UserService with a SQLAlchemy session."""
        self.session = session

    def get_user(self, uid: str) -> User | None:
        """Return a user profile, or None."""
        with storage_operation(self.session, "reading user"):
            record = self.session.get(UserRecord, uid)
        return User.model_validate(record) if record else None

    def get_user_by_email(self, email: str) -> User | None:
        """Return the user registered with an email, or None."""
        with storage_operation(self.session, "reading user by email"):
            record = self.session.scalars(select(UserRecord).where(UserRecord.email == email)).first()
        return User.model_validate(record) if record else None

    def ensure_user(self, identity: CurrentUser, currency: str = "ILS") -> User:
        """Return the caller's profile, creating it on first login.

        A first login also creates a personal workspace seeded with the default categories. The profile, the
        workspace, the owner's membership and the categories are committed in one batch, so a failed login leaves
        nothing behind. A known user who belongs to no workspace gets a new personal workspace the same way, so every
        user belongs to at least one workspace.
        """
        workspaces = WorkspaceService(self.session)
        with storage_operation(self.session, "reading user"):
            record = self.session.get(UserRecord, identity.uid)
        if record is not None and workspaces.list_user_workspaces(identity.uid):
            return User.model_validate(record)

        workspace_id, workspace_records = workspaces.build_workspace(
            identity.uid, WorkspaceInput(name=DEFAULT_WORKSPACE_NAME, type=WorkspaceType.PERSONAL), currency
        )
        if record is None:
            record = UserRecord(
                uid=identity.uid,
                email=identity.email,
                display_name=identity.display_name,
                plan=SubscriptionPlan.FREE.value,
                created_at=utcnow(),
            )
            action = "creating user"
        else:
            logger.warning(f"User {identity.uid} belongs to no workspace, creating a personal one")
            action = "restoring personal workspace"
        record.default_workspace_id = workspace_id
        with storage_operation(self.session, action, commit=True):
            self.session.add(record)
            self.session.add_all(workspace_records)
        logger.info(f"User {identity.uid} owns personal workspace {workspace_id}")
        return User.model_validate(record)

    def update_user_profile(self, uid: str, data: UserUpdate) -> bool:
        """Apply a partial profile update. Returns False when the user does not exist."""
        with storage_operation(self.session, "updating user", commit=True):
            record = self.session.get(UserRecord, uid)
            if record is None:
                return False
            for key, value in data.model_dump(exclude_unset=True).items():
                setattr(record, key, value)
        return True

    def update_user_plan(self, uid: str, plan: SubscriptionPlan) -> bool:
        """Change a user's subscription plan. Returns False when the user does not exist."""
        with storage_operation(self.session, "updating user plan", commit=True):
            record = self.session.get(UserRecord, uid)
            if record is None:
                return False
            record.plan = plan.value
        logger.info(f"User {uid} moved to plan {plan.value}")
        return True
