"""Tests for the account store and the connection lifecycle."""
import json
from datetime import datetime, timezone

import pytest

from transactions_service.errors import MalformedAccountError, StorageUnavailableError
from transactions_service.storage.database import (
    ConnectionState,
    Database,
    decode_document,
    encode_document,
    sqlite_path_from_url,
)
from conftest import (
    EMPTY_USER_ID,
    NATIVE_USER_ID,
    NO_FIELD_USER_ID,
    SCENARIO_USER_ID,
)

UTC = timezone.utc


def test_native_dates_are_wrapped_in_stored_documents():
    text = encode_document({"date": datetime(2024, 3, 5, 10, 0, tzinfo=UTC), "other": "2024-03-05"})
    raw = json.loads(text)
    assert raw["date"] == {"$date": "2024-03-05T10:00:00.000Z"}
    assert raw["other"] == "2024-03-05"


def test_decode_restores_native_dates():
    doc = decode_document('{"a": {"$date": "2024-03-05T10:00:00.000Z"}, "b": {"$date": 1709632800000}}')
    assert doc["a"] == datetime(2024, 3, 5, 10, 0, tzinfo=UTC)
    assert doc["b"] == datetime(2024, 3, 5, 10, 0, tzinfo=UTC)


def test_decode_accepts_number_long_and_oid_wrappers():
    doc = decode_document(
        '{"_id": {"$oid": "507f1f77bcf86cd799439011"}, "d": {"$date": {"$numberLong": "1709632800000"}}}'
    )
    assert doc["_id"] == "507f1f77bcf86cd799439011"
    assert doc["d"] == datetime(2024, 3, 5, 10, 0, tzinfo=UTC)


def test_sqlite_path_from_url():
    assert sqlite_path_from_url("sqlite:///./bank_app.db") == "./bank_app.db"
    with pytest.raises(ValueError):
        sqlite_path_from_url("mongodb://mongo:27017/bank_app")
    with pytest.raises(ValueError):
        sqlite_path_from_url("sqlite:///:memory:")


def test_list_accounts_skips_empty_and_absent_transactions(seeded_store):
    accounts = seeded_store.list_accounts_with_transactions()
    assert [a.id for a in accounts] == [SCENARIO_USER_ID, NATIVE_USER_ID]


def test_native_dates_round_trip_through_store(seeded_store):
    account = seeded_store.find_account(NATIVE_USER_ID)
    assert account.transactions[0].date == datetime(2024, 3, 10, 12, 0, tzinfo=UTC)
    assert isinstance(account.transactions[0].date, datetime)


def test_text_dates_stay_text_in_store(seeded_store):
    account = seeded_store.find_account(SCENARIO_USER_ID)
    assert account.transactions[0].date == "2024-03-05"


def test_find_account_is_case_insensitive(seeded_store):
    assert seeded_store.find_account(SCENARIO_USER_ID.upper()).id == SCENARIO_USER_ID


def test_find_account_without_transactions(seeded_store):
    assert seeded_store.find_account(EMPTY_USER_ID).transactions == []
    assert seeded_store.find_account(NO_FIELD_USER_ID).transactions is None


def test_find_missing_account_returns_none(seeded_store):
    assert seeded_store.find_account("507f1f77bcf86cd799439099") is None


def test_insert_replaces_existing_document(store):
    store.insert_accounts([{"_id": SCENARIO_USER_ID, "transactions": []}])
    store.insert_accounts([{"_id": SCENARIO_USER_ID.upper(), "transactions": [
        {"type": "debit", "amount": 1, "date": "2024-01-01"},
    ]}])
    account = store.find_account(SCENARIO_USER_ID)
    assert len(account.transactions) == 1


def test_insert_requires_an_id(store):
    with pytest.raises(ValueError):
        store.insert_accounts([{"transactions": []}])


def test_clear_removes_everything(seeded_store):
    assert seeded_store.clear() == 4
    assert seeded_store.list_accounts_with_transactions() == []


def test_malformed_transaction_is_rejected_at_the_boundary(store):
    store.insert_accounts([{"_id": SCENARIO_USER_ID, "transactions": [{"type": "debit", "date": "2024-01-01"}]}])
    with pytest.raises(MalformedAccountError) as exc_info:
        store.find_account(SCENARIO_USER_ID)
    assert exc_info.value.account_id == SCENARIO_USER_ID


def test_new_database_is_not_ready(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'x.db'}")
    assert db.state is ConnectionState.UNINITIALIZED
    with pytest.raises(StorageUnavailableError):
        db.accounts


def test_connect_makes_database_ready(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'x.db'}")
    store = db.connect()
    assert db.state is ConnectionState.READY
    assert db.is_ready
    assert db.accounts is store
    assert db.connect() is store


def test_close_returns_to_uninitialized(database):
    database.close()
    assert database.state is ConnectionState.UNINITIALIZED
    with pytest.raises(StorageUnavailableError):
        database.accounts


def test_connect_failure_marks_database_failed(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'missing-dir' / 'x.db'}")
    with pytest.raises(StorageUnavailableError):
        db.connect()
    assert db.state is ConnectionState.FAILED
    with pytest.raises(StorageUnavailableError):
        db.accounts


def test_unsupported_url_marks_database_failed():
    db = Database("mongodb://mongo:27017/bank_app")
    with pytest.raises(StorageUnavailableError):
        db.connect()
    assert db.state is ConnectionState.FAILED
