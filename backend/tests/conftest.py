"""Shared pytest fixtures for transactions service tests."""
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from transactions_service.main import app
from transactions_service.storage.database import Database, get_database

SCENARIO_USER_ID = "507f1f77bcf86cd799439011"
EMPTY_USER_ID = "507f1f77bcf86cd799439012"
NO_FIELD_USER_ID = "507f1f77bcf86cd799439013"
NATIVE_USER_ID = "507f1f77bcf86cd799439014"
MISSING_USER_ID = "507f1f77bcf86cd799439099"


@pytest.fixture
def database(tmp_path):
    """Connected database backed by a temporary SQLite file."""
    db = Database(f"sqlite:///{tmp_path / 'test.db'}")
    db.connect()
    yield db
    db.close()


@pytest.fixture
def store(database):
    return database.accounts


@pytest.fixture
def sample_accounts():
    """Accounts covering text dates, native dates, empty and absent transaction lists."""
    return [
        {
            "_id": SCENARIO_USER_ID,
            "name": "Alice",
            "transactions": [
                {"type": "debit", "amount": 50, "date": "2024-03-05"},
                {"type": "credit", "amount": 200, "date": "2024-03-20"},
                {"type": "debit", "amount": 10, "date": "2024-01-02"},
            ],
        },
        {"_id": EMPTY_USER_ID, "name": "Bob", "transactions": []},
        {"_id": NO_FIELD_USER_ID, "name": "Carol"},
        {
            "_id": NATIVE_USER_ID,
            "name": "Dave",
            "transactions": [
                {"type": "debit", "amount": 7.5, "date": datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)},
                {"type": "credit", "amount": 1000, "date": datetime(2023, 12, 31, 23, 59, tzinfo=timezone.utc)},
            ],
        },
    ]


@pytest.fixture
def seeded_store(store, sample_accounts):
    store.insert_accounts(sample_accounts)
    return store


@pytest.fixture
def client(database):
    """TestClient wired to the temporary database instead of the process-wide one."""
    app.dependency_overrides[get_database] = lambda: database
    yield TestClient(app)
    app.dependency_overrides.clear()
