"""CategoryService: category catalog of a workspace, including the default catalog seeded into new workspaces."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from budgetbook.core.db import CategoryRecord, storage_operation
from budgetbook.core.models import Category, CategoryInput, CategoryOrder, CategoryUpdate, TransactionType
from budgetbook.core.utils import get_logger, new_id

logger = get_logger("budgetbook.categories")

DEFAULT_CATEGORIES: tuple[CategoryInput, ...] = (
    # income
    CategoryInput(type="income", group="fixed", label="משכורת", icon="💰", color="#10b981", order=0, is_default=True),
    CategoryInput(type="income", group="variable", label="פרילנס", icon="💼", color="#3b82f6", order=1, is_default=True),
    CategoryInput(type="income", group="variable", label="השקעות", icon="📈", color="#8b5cf6", order=2, is_default=True),
    CategoryInput(type="income", group="variable", label="אחר", icon="💵", color="#06b6d4", order=3, is_default=True),
    # fixed expenses
    CategoryInput(type="expense", group="fixed", label="שכר דירה", icon="🏠", color="#ef4444", order=0, is_default=True),
    CategoryInput(type="expense", group="fixed", label="חשמל ומים", icon="⚡", color="#f59e0b", order=1, is_default=True),
    CategoryInput(
        type="expense", group="fixed", label="אינטרנט וטלפון", icon="📱", color="#8b5cf6", order=2, is_default=True
    ),
    CategoryInput(type="expense", group="fixed", label="ביטוחים", icon="🛡️", color="#06b6d4", order=3, is_default=True),
    CategoryInput(type="expense", group="fixed", label="הלוואות", icon="🏦", color="#dc2626", order=4, is_default=True),
    # variable expenses
    CategoryInput(
        type="expense", group="variable", label="מזון וסופר", icon="🛒", color="#10b981", order=5, is_default=True
    ),
    CategoryInput(type="expense", group="variable", label="תחבורה", icon="🚗", color="#3b82f6", order=6, is_default=True),
    CategoryInput(
        type="expense", group="variable", label="בילויים ואירוח", icon="🎉", color="#ec4899", order=7, is_default=True
    ),
    CategoryInput(type="expense", group="variable", label="בריאות", icon="⚕️", color="#f43f5e", order=8, is_default=True),
    CategoryInput(type="expense", group="variable", label="חינוך", icon="📚", color="#6366f1", order=9, is_default=True),
    CategoryInput(type="expense", group="variable", label="ביגוד", icon="👕", color="#a855f7", order=10, is_default=True),
    CategoryInput(type="expense", group="variable", label="קניות", icon="🛍️", color="#f97316", order=11, is_default=True),
    CategoryInput(type="expense", group="variable", label="שונות", icon="📦", color="#64748b", order=12, is_default=True),
)


def build_default_category_records(workspace_id: str) -> list[CategoryRecord]:
    """Build (unsaved) records for the default catalog of a workspace."""
    return [
        CategoryRecord(id=new_id(), workspace_id=workspace_id, **cat.model_dump(mode="json"))
        for cat in DEFAULT_CATEGORIES
    ]


class CategoryService:
    """Service for category documents of a workspace."""

    def __init__(self, session: Session) -> None:
        """Initialize the CategoryService with a SQLAlchemy session."""
        self.session = session

    def seed_default_categories(self, workspace_id: str) -> None:
        """Add the default catalog to a workspace in a single batch."""
        with storage_operation(self.session, "seeding default categories", commit=True):
            self.session.add_all(build_default_category_records(workspace_id))
        logger.info(f"Seeded {len(DEFAULT_CATEGORIES)} default categories into workspace {workspace_id}")

    def list_categories(self, workspace_id: str) -> list[Category]:
        """Return the categories of a workspace in ascending display order."""
        stmt = (
            select(CategoryRecord)
            .where(CategoryRecord.workspace_id == workspace_id)
            .order_by(CategoryRecord.order.asc())
        )
        with storage_operation(self.session, "listing categories"):
            records = self.session.scalars(stmt).all()
        return [Category.model_validate(record) for record in records]

    def list_categories_by_type(self, workspace_id: str, tx_type: TransactionType) -> list[Category]:
        """Return the categories of one type in ascending display order."""
        stmt = (
            select(CategoryRecord)
            .where(CategoryRecord.workspace_id == workspace_id, CategoryRecord.type == tx_type.value)
            .order_by(CategoryRecord.order.asc())
        )
        with storage_operation(self.session, "listing categories by type"):
            records = self.session.scalars(stmt).all()
        return [Category.model_validate(record) for record in records]

    def get_category(self, workspace_id: str, category_id: str) -> Category | None:
        """Return a category of the workspace, or None."""
        record = self._get_record(workspace_id, category_id)
        return Category.model_validate(record) if record else None

    def create_category(self, workspace_id: str, data: CategoryInput) -> str:
        """Create a category and return its id."""
        category_id = new_id()
        record = CategoryRecord(id=category_id, workspace_id=workspace_id, **data.model_dump(mode="json"))
        with storage_operation(self.session, "creating category", commit=True):
            self.session.add(record)
        logger.info(f"Created category {category_id} ({data.label}) in workspace {workspace_id}")
        return category_id

    def update_category(self, workspace_id: str, category_id: str, data: CategoryUpdate) -> bool:
        """Apply a partial update. Returns False when the category does not exist."""
        record = self._get_record(workspace_id, category_id)
        if record is None:
            return False
        with storage_operation(self.session, "updating category", commit=True):
            for key, value in data.model_dump(mode="json", exclude_unset=True).items():
                # only the budget target may be cleared
                if value is None and key != "target_monthly":
                    continue
                setattr(record, key, value)
        return True

    def delete_category(self, workspace_id: str, category_id: str) -> bool:
        """Delete a category. Its transactions are left untouched and keep the dangling reference."""
        record = self._get_record(workspace_id, category_id)
        if record is None:
            return False
        with storage_operation(self.session, "deleting category", commit=True):
            self.session.delete(record)
        logger.info(f"Deleted category {category_id} from workspace {workspace_id}")
        return True

    def reorder_categories(self, workspace_id: str, orders: list[CategoryOrder]) -> int:
        """Write new display positions in a single batch and return how many categories were moved."""
        wanted = {item.id: item.order for item in orders}
        stmt = select(CategoryRecord).where(
            CategoryRecord.workspace_id == workspace_id, CategoryRecord.id.in_(list(wanted))
        )
        with storage_operation(self.session, "reordering categories", commit=True):
            records = self.session.scalars(stmt).all()
            for record in records:
                record.order = wanted[record.id]
        return len(records)

    def _get_record(self, workspace_id: str, category_id: str) -> CategoryRecord | None:
        stmt = select(CategoryRecord).where(
            CategoryRecord.workspace_id == workspace_id, CategoryRecord.id == category_id
        )
        with storage_operation(self.session, "reading category"):
            return self.session.scalars(stmt).first()
