"""TransactionService: reads and writes of transaction documents.

Reads return fully materialized lists ordered newest first. Mutations return only identifiers or success flags;
callers re-query when they need the new state.
"""

from datetime import date

from sqlalchemy import Select, delete, func, select
from sqlalchemy.orm import Session

from budgetbook.core.db import TransactionRecord, storage_operation
from budgetbook.core.models import Transaction, TransactionInput, TransactionUpdate
from budgetbook.core.utils import get_logger, new_id, utcnow

logger = get_logger("budgetbook.transactions")


def _in_date_range(stmt: Select, start_date: date | None, end_date: date | None) -> Select:
    if start_date is not None:
        stmt = stmt.where(TransactionRecord.date >= start_date)
    if end_date is not None:
        stmt = stmt.where(TransactionRecord.date <= end_date)
    return stmt


class TransactionService:
    """Service for transaction documents of a workspace."""

    def __init__(self, session: Session) -> None:
        """Initialize the TransactionService with a SQLAlchemy session."""
        self.session = session

    def create_transaction(self, workspace_id: str, user_id: str, data: TransactionInput) -> str:
        """Record a transaction and return its id."""
        transaction_id = new_id()
        now = utcnow()
        record = TransactionRecord(
            id=transaction_id,
            workspace_id=workspace_id,
            type=data.type.value,
            amount=data.amount,
            category_id=data.category_id,
            description=data.description,
            date=data.date,
            tags=list(data.tags),
            notes=data.notes,
            is_recurring=data.is_recurring,
            recurring_id=data.recurring_id,
            created_by=user_id,
            created_at=now,
            updated_at=now,
        )
        with storage_operation(self.session, "creating transaction", commit=True):
            self.session.add(record)
        logger.info(f"Created {data.type.value} transaction {transaction_id} in workspace {workspace_id}")
        return transaction_id

    def get_transaction(self, workspace_id: str, transaction_id: str) -> Transaction | None:
        """Return a transaction of the workspace, or None."""
        record = self._get_record(workspace_id, transaction_id)
        return Transaction.model_validate(record) if record else None

    def list_transactions(
        self,
        workspace_id: str,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int | None = 100,
    ) -> list[Transaction]:
        """Return transactions in an inclusive date range, newest date first, at most ``limit`` of them."""
        stmt = select(TransactionRecord).where(TransactionRecord.workspace_id == workspace_id)
        stmt = _in_date_range(stmt, start_date, end_date)
        stmt = stmt.order_by(TransactionRecord.date.desc(), TransactionRecord.created_at.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return self._fetch(stmt, "listing transactions")

    def list_by_category(
        self,
        workspace_id: str,
        category_id: str,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[Transaction]:
        """Return the transactions of one category, newest date first."""
        stmt = select(TransactionRecord).where(
            TransactionRecord.workspace_id == workspace_id, TransactionRecord.category_id == category_id
        )
        stmt = _in_date_range(stmt, start_date, end_date).order_by(TransactionRecord.date.desc())
        return self._fetch(stmt, "listing transactions by category")

    def recent_transactions(self, workspace_id: str, limit: int = 10) -> list[Transaction]:
        """Return the most recently recorded transactions."""
        stmt = (
            select(TransactionRecord)
            .where(TransactionRecord.workspace_id == workspace_id)
            .order_by(TransactionRecord.created_at.desc())
            .limit(limit)
        )
        return self._fetch(stmt, "listing recent transactions")

    def search_transactions(self, workspace_id: str, search_text: str) -> list[Transaction]:
        """Return transactions whose description or notes contain the text, ignoring case."""
        needle = search_text.lower()
        stmt = (
            select(TransactionRecord)
            .where(TransactionRecord.workspace_id == workspace_id)
            .order_by(TransactionRecord.date.desc())
        )
        return [
            tx
            for tx in self._fetch(stmt, "searching transactions")
            if needle in tx.description.lower() or (tx.notes is not None and needle in tx.notes.lower())
        ]

    def count_transactions(self, workspace_id: str) -> int:
        """Return the number of transactions in a workspace."""
        stmt = select(func.count()).select_from(TransactionRecord).where(TransactionRecord.workspace_id == workspace_id)
        with storage_operation(self.session, "counting transactions"):
            return self.session.scalar(stmt) or 0

    def update_transaction(self, workspace_id: str, transaction_id: str, data: TransactionUpdate) -> bool:
        """Apply a partial update. Returns False when the transaction does not exist."""
        record = self._get_record(workspace_id, transaction_id)
        if record is None:
            return False
        changes = data.model_dump(exclude_unset=True)
        with storage_operation(self.session, "updating transaction", commit=True):
            for key, value in changes.items():
                # only notes may be cleared
                if value is None and key != "notes":
                    continue
                setattr(record, key, value.value if key == "type" else value)
            record.updated_at = utcnow()
        return True

    def delete_transaction(self, workspace_id: str, transaction_id: str) -> bool:
        """Delete a transaction. Returns False when it does not exist."""
        record = self._get_record(workspace_id, transaction_id)
        if record is None:
            return False
        with storage_operation(self.session, "deleting transaction", commit=True):
            self.session.delete(record)
        logger.info(f"Deleted transaction {transaction_id} from workspace {workspace_id}")
        return True

    def delete_transactions(self, workspace_id: str, transaction_ids: list[str]) -> int:
        """Delete several transactions in a single batch and return how many were removed."""
        stmt = delete(TransactionRecord).where(
            TransactionRecord.workspace_id == workspace_id, TransactionRecord.id.in_(transaction_ids)
        )
        with storage_operation(self.session, "deleting transactions", commit=True):
            result = self.session.execute(stmt)
        logger.info(f"Deleted {result.rowcount} transactions from workspace {workspace_id}")
        return result.rowcount

    def _fetch(self, stmt: Select, action: str) -> list[Transaction]:
        with storage_operation(self.session, action):
            records = self.session.scalars(stmt).all()
        return [Transaction.model_validate(record) for record in records]

    def _get_record(self, workspace_id: str, transaction_id: str) -> TransactionRecord | None:
        stmt = select(TransactionRecord).where(
            TransactionRecord.workspace_id == workspace_id, TransactionRecord.id == transaction_id
        )
        with storage_operation(self.session, "reading transaction"):
            return self.session.scalars(stmt).first()
