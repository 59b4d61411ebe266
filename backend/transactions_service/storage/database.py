"""Account document storage using SQLite."""
import json
import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from transactions_service.config import settings
from transactions_service.errors import MalformedAccountError, StorageUnavailableError
from transactions_service.models.account import Account
from transactions_service.utils.identifiers import canonical_account_key
from transactions_service.utils.timestamp import parse_timestamp

logger = logging.getLogger(__name__)

SQLITE_URL_PREFIX = "sqlite:///"


def sqlite_path_from_url(url: str) -> str:
    """Extract the file path from a ``sqlite:///path`` URL."""
    if not url.startswith(SQLITE_URL_PREFIX):
        raise ValueError(f"Unsupported database URL: {url}")
    path = url[len(SQLITE_URL_PREFIX):]
    if not path or path == ":memory:":
        raise ValueError("database_url must name a file; in-memory databases are not shared across connections")
    return path


# ---------------------------------------------------------------------------
# Document codec: native dates are stored as {"$date": ...}
# ---------------------------------------------------------------------------

def _encode_value(value: Any) -> Any:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return {"$date": value.replace(tzinfo=None).isoformat(timespec="milliseconds") + "Z"}
    if isinstance(value, date):
        return {"$date": value.isoformat() + "T00:00:00.000Z"}
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _decode_value(obj: Dict[str, Any]) -> Any:
    if set(obj) == {"$date"}:
        raw = obj["$date"]
        if isinstance(raw, dict) and set(raw) == {"$numberLong"}:
            raw = int(raw["$numberLong"])
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return datetime.fromtimestamp(raw / 1000, tz=timezone.utc)
        if isinstance(raw, str):
            return parse_timestamp(raw)
        raise ValueError(f"Invalid $date value: {raw!r}")
    if set(obj) == {"$oid"}:
        return obj["$oid"]
    return obj


def encode_document(document: Dict[str, Any]) -> str:
    """Serialize an account document, wrapping native dates."""
    return json.dumps(document, default=_encode_value)


def decode_document(text: str) -> Dict[str, Any]:
    """Parse an account document, restoring native dates."""
    return json.loads(text, object_hook=_decode_value)


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------

class AccountStore:
    """Storage for account (``users``) documents."""

    def __init__(self, db_path: str = "bank_app.db"):
        self.db_path = db_path

    def init_schema(self):
        """Initialize database tables."""
        with self._get_conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    document TEXT NOT NULL
                )
            """)
            conn.commit()

    def ping(self) -> bool:
        with self._get_conn() as conn:
            return conn.execute("SELECT 1").fetchone()[0] == 1

    @contextmanager
    def _get_conn(self):
        """Get database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def list_accounts_with_transactions(self) -> List[Account]:
        """All accounts whose ``transactions`` array exists and is non-empty, in insertion order."""
        with self._get_conn() as conn:
            rows = conn.execute("""
                SELECT id, document FROM users
                WHERE json_type(document, '$.transactions') = 'array'
                  AND json_array_length(document, '$.transactions') > 0
                ORDER BY rowid ASC
            """).fetchall()
        return [self._to_account(row) for row in rows]

    def find_account(self, account_key: str) -> Optional[Account]:
        """Look up one account by its external key (case-insensitive)."""
        with self._get_conn() as conn:
            row = conn.execute(
                "SELECT id, document FROM users WHERE id = ?",
                (canonical_account_key(account_key),),
            ).fetchone()
        if not row:
            return None
        return self._to_account(row)

    def insert_accounts(self, documents: Iterable[Dict[str, Any]]) -> int:
        """Insert or replace account documents. Each must carry an ``_id``."""
        with self._get_conn() as conn:
            count = 0
            for document in documents:
                raw_id = document.get("_id")
                if isinstance(raw_id, dict) and "$oid" in raw_id:
                    raw_id = raw_id["$oid"]
                if not isinstance(raw_id, str) or not raw_id:
                    raise ValueError(f"Account document without a usable _id: {document!r}")
                account_id = canonical_account_key(raw_id)
                body = {**document, "_id": account_id}
                conn.execute(
                    "INSERT OR REPLACE INTO users (id, document) VALUES (?, ?)",
                    (account_id, encode_document(body)),
                )
                count += 1
            conn.commit()
            return count

    def clear(self) -> int:
        """Delete every account document."""
        with self._get_conn() as conn:
            deleted = conn.execute("DELETE FROM users").rowcount
            conn.commit()
            return deleted

    @staticmethod
    def _to_account(row: sqlite3.Row) -> Account:
        account_id = row["id"]
        try:
            document = decode_document(row["document"])
            document["_id"] = account_id
            return Account.model_validate(document)
        except (ValueError, ValidationError) as e:
            raise MalformedAccountError(account_id, str(e)) from e


# ---------------------------------------------------------------------------
# Connection lifecycle
# ---------------------------------------------------------------------------

class ConnectionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    CONNECTING = "connecting"
    READY = "ready"
    FAILED = "failed"


class Database:
    """
    Process-wide storage handle.

    Lifecycle: uninitialized -> connecting -> ready, or -> failed.
    ``accounts`` only hands out the store while the state is READY;
    in every other state it raises StorageUnavailableError.
    """

    def __init__(self, database_url: str):
        self.database_url = database_url
        self._state = ConnectionState.UNINITIALIZED
        self._store: Optional[AccountStore] = None
        self._lock = threading.Lock()

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is ConnectionState.READY

    def connect(self) -> AccountStore:
        """
        Open the store and verify it answers.

        Raises:
            StorageUnavailableError: If the store cannot be opened
        """
        with self._lock:
            if self._state is ConnectionState.READY and self._store is not None:
                return self._store
            self._state = ConnectionState.CONNECTING

        try:
            store = AccountStore(sqlite_path_from_url(self.database_url))
            store.init_schema()
            store.ping()
        except (ValueError, sqlite3.Error) as e:
            with self._lock:
                self._state = ConnectionState.FAILED
                self._store = None
            raise StorageUnavailableError(f"Could not connect to {self.database_url}: {e}") from e

        with self._lock:
            self._store = store
            self._state = ConnectionState.READY
        logger.info("Database connection ready", extra={"database_url": self.database_url})
        return store

    def close(self):
        with self._lock:
            self._store = None
            self._state = ConnectionState.UNINITIALIZED

    @property
    def accounts(self) -> AccountStore:
        with self._lock:
            if self._state is not ConnectionState.READY or self._store is None:
                raise StorageUnavailableError("DB not ready")
            return self._store


# Global instance
_database = None


def get_database() -> Database:
    """Get the process-wide database handle (not connected until ``connect()``)."""
    global _database
    if _database is None:
        _database = Database(settings.database_url)
    return _database
