from __future__ import annotations

from datetime import datetime
from typing import Any, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from spending_insights import models
from spending_insights.core.database import Base, create_db_engine, get_db
from spending_insights.main import app


@pytest.fixture(scope="session")
def engine(tmp_path_factory):
    # file backed so the dashboard worker sessions see rows committed by the test
    path = tmp_path_factory.mktemp("db") / "insights_test.sqlite3"
    eng = create_db_engine(f"sqlite:///{path}")
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def db_session(engine) -> Iterator[Session]:
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    # user 1 is the demo user; user 2 exists only to prove scoping
    session.add_all(
        [
            models.User(id=1, email="demo@example.com", name="Demo", is_active=True),
            models.User(id=2, email="other@example.com", name="Other", is_active=True),
        ]
    )
    session.commit()
    try:
        yield session
    finally:
        session.close()
        with engine.begin() as conn:
            for table in reversed(Base.metadata.sorted_tables):
                conn.execute(table.delete())


@pytest.fixture(autouse=True)
def override_get_db(db_session):
    def _get_db_override() -> Iterator[Session]:
        yield db_session

    app.dependency_overrides[get_db] = _get_db_override
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def client(db_session) -> Iterator[TestClient]:
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def add_txn(db_session):
    """Insert and commit a transaction; returns the stored row."""

    def _add(
        occurred_at: datetime,
        amount: float,
        *,
        category: str = "Others",
        merchant: str = "Corner Store",
        merchant_category: str | None = None,
        user_id: int = 1,
        **extra: Any,
    ) -> models.Transaction:
        txn = models.Transaction(
            user_id=user_id,
            occurred_at=occurred_at,
            amount=amount,
            category=category,
            merchant=merchant,
            merchant_category=merchant_category,
            **extra,
        )
        db_session.add(txn)
        db_session.commit()
        db_session.refresh(txn)
        return txn

    return _add
