"""Document tables and session helpers for Budgetbook.

Each table holds one document collection. Every query is scoped by an equality match on the owning workspace (or
user), optionally narrowed by an inclusive date range, ordered, and limited. Writes that touch several documents are
committed together in one session transaction.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import JSON, Boolean, Column, Date, DateTime, Float, Integer, String, Text, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from budgetbook.core.errors import StorageError
from budgetbook.core.utils import get_logger

Base = declarative_base()

logger = get_logger("budgetbook.db")


class UserRecord(Base):
    """A user profile, keyed by the identity provider's uid."""

    __tablename__ = "users"
    uid = Column(String, primary_key=True)
    email = Column(String, index=True, nullable=False)
    display_name = Column(String, nullable=True)
    photo_url = Column(String, nullable=True)
    plan = Column(String, nullable=False, default="free")
    default_workspace_id = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)


class WorkspaceRecord(Base):
    """A workspace document."""

    __tablename__ = "workspaces"
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    owner_id = Column(String, index=True, nullable=False)
    currency = Column(String, nullable=False)
    icon = Column(String, nullable=True)
    color = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class MemberRecord(Base):
    """A (workspace, user) membership. The id is ``{workspace_id}_{uid}``."""

    __tablename__ = "workspace_members"
    id = Column(String, primary_key=True)
    workspace_id = Column(String, index=True, nullable=False)
    uid = Column(String, index=True, nullable=False)
    role = Column(String, nullable=False)
    added_at = Column(DateTime(timezone=True), nullable=False)


class CategoryRecord(Base):
    """A category document scoped to a workspace."""

    __tablename__ = "categories"
    id = Column(String, primary_key=True)
    workspace_id = Column(String, index=True, nullable=False)
    type = Column(String, nullable=False)
    group = Column(String, nullable=False)
    label = Column(String, nullable=False)
    icon = Column(String, nullable=False)
    color = Column(String, nullable=False)
    order = Column(Integer, nullable=False, default=0)
    target_monthly = Column(Float, nullable=True)
    is_default = Column(Boolean, nullable=False, default=False)


class TransactionRecord(Base):
    """A transaction document scoped to a workspace."""

    __tablename__ = "transactions"
    id = Column(String, primary_key=True)
    workspace_id = Column(String, index=True, nullable=False)
    type = Column(String, nullable=False)
    amount = Column(Float, nullable=False)
    category_id = Column(String, index=True, nullable=False)
    description = Column(String, nullable=False, default="")
    date = Column(Date, index=True, nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    notes = Column(Text, nullable=True)
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurring_id = Column(String, nullable=True)
    created_by = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


def get_engine(url: str | None = None) -> Engine:
    """Create a SQLAlchemy engine using the given or the configured database URL."""
    if url is None:
        from budgetbook.core.settings import get_settings

        url = get_settings().database_url
    if url.startswith("sqlite"):
        if url in ("sqlite://", "sqlite:///:memory:"):
            return create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url)


def init_db(engine: Engine) -> None:
    """Create every document table that does not exist yet."""
    Base.metadata.create_all(engine)


engine = get_engine()
SessionLocal = sessionmaker(autoflush=False, bind=engine)


def get_db() -> Iterator[Session]:
    """Yield a session for one request and close it afterwards."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@contextmanager
def storage_operation(session: Session, action: str, *, commit: bool = False) -> Iterator[Session]:
    """Run store access, committing when asked and turning driver failures into StorageError.

    A failed write is rolled back as a whole, so none of its documents become visible.
    """
    try:
        yield session
        if commit:
            session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        msg = f"Storage failure while {action}: {exc}"
        logger.exception(msg)
        raise StorageError(msg) from exc
