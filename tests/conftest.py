"""Pytest fixtures for testing"""

import os

# Keep the application's module-level engine off PostgreSQL during tests
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import datetime
from decimal import Decimal
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from economy_metrics.api.main import create_app
from economy_metrics.domain.aggregation import AggregationEngine
from economy_metrics.domain.models import Account, Transaction
from economy_metrics.infrastructure.database.models import Base
from economy_metrics.infrastructure.database.session import get_db
from economy_metrics.infrastructure.database.store import DataStore


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
test_engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=test_engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def store(db: Session) -> DataStore:
    """Data store bound to the test session"""
    return DataStore(db)


@pytest.fixture
def aggregation_engine(store: DataStore) -> AggregationEngine:
    """Aggregation engine writing to the test database"""
    return AggregationEngine(store)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def accounts() -> dict[str, Account]:
    """Two accounts in group 1, one each in groups 2 and 3"""
    return {
        "alice": Account(account_id=1000000000000001, group_id=1),
        "bob": Account(account_id=2000000000000001, group_id=2),
        "carol": Account(account_id=3000000000000001, group_id=3),
        "dave": Account(account_id=1000000000000002, group_id=1),
    }


@pytest.fixture
def make_transaction() -> Callable[..., Transaction]:
    """Build transactions with sensible defaults"""
    counter = {"next_id": 1}

    def _make(
        sender: Account,
        recipient: Account,
        amount: str | Decimal,
        timestamp: datetime,
        transaction_id: int | None = None,
    ) -> Transaction:
        if transaction_id is None:
            transaction_id = counter["next_id"]
        counter["next_id"] = transaction_id + 1
        return Transaction(
            transaction_id=transaction_id,
            amount=Decimal(amount),
            sender=sender,
            recipient=recipient,
            timestamp=timestamp,
        )

    return _make
