"""Shared fixtures and builders for the Budgetbook test suite."""

from collections.abc import Iterator
from datetime import UTC, date, datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from budgetbook.core.db import get_db, get_engine, init_db
from budgetbook.core.models import Category, Transaction
from main import app

CREATED = datetime(2025, 1, 1, tzinfo=UTC)


def make_category(cat_id: str, tx_type: str = "expense", group: str = "variable", **extra: object) -> Category:
    """Build a category with display defaults."""
    fields = {
        "id": cat_id,
        "type": tx_type,
        "group": group,
        "label": cat_id.title(),
        "icon": "*",
        "color": "#000000",
        "order": 0,
    }
    fields.update(extra)
    return Category(**fields)


def make_transaction(
    tx_id: str,
    amount: float,
    category_id: str,
    tx_type: str = "expense",
    on: date = date(2025, 3, 15),
    **extra: object,
) -> Transaction:
    """Build a transaction in workspace ``ws``."""
    fields = {
        "id": tx_id,
        "workspace_id": "ws",
        "type": tx_type,
        "amount": amount,
        "category_id": category_id,
        "description": f"tx {tx_id}",
        "date": on,
        "created_by": "u1",
        "created_at": CREATED,
        "updated_at": CREATED,
    }
    fields.update(extra)
    return Transaction(**fields)


@pytest.fixture
def engine() -> Iterator[Engine]:
    """An in-memory database with every document table created."""
    db_engine = get_engine("sqlite://")
    init_db(db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Iterator[Session]:
    """A session on the in-memory database."""
    db_session = sessionmaker(autoflush=False, bind=engine)()
    yield db_session
    db_session.close()


@pytest.fixture
def client(engine: Engine) -> Iterator[TestClient]:
    """A TestClient whose requests use the in-memory database."""
    factory = sessionmaker(autoflush=False, bind=engine)

    def override_get_db() -> Iterator[Session]:
        db_session = factory()
        try:
            yield db_session
        finally:
            db_session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
