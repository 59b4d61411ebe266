"""Error types raised by the transactions service."""
from typing import Optional


class TransactionsServiceError(Exception):
    """Base class for service-level errors."""


class StorageUnavailableError(TransactionsServiceError):
    """Storage connection is not established (yet) or has been lost."""


class InvalidIdentifierError(TransactionsServiceError):
    """Caller-supplied account key is not 24 hexadecimal characters."""

    def __init__(self, account_key: Optional[str]):
        self.account_key = account_key
        super().__init__(f"Invalid account key: {account_key!r}")


class AccountNotFoundError(TransactionsServiceError):
    """Account key is well formed but no account matches it."""

    def __init__(self, account_key: str):
        self.account_key = account_key
        super().__init__(f"Account {account_key} not found")


class AggregationError(TransactionsServiceError):
    """Unexpected failure while loading, normalizing or grouping transactions."""


class InvalidTransactionDateError(AggregationError):
    """A stored transaction date could not be normalized."""

    def __init__(self, account_id: str, index: int, value: object):
        self.account_id = account_id
        self.index = index
        self.value = value
        super().__init__(
            f"Transaction {index} of account {account_id} has an invalid date: {value!r}"
        )


class MalformedAccountError(AggregationError):
    """A stored account document does not match the expected shape."""

    def __init__(self, account_id: str, reason: str):
        self.account_id = account_id
        self.reason = reason
        super().__init__(f"Account {account_id} is malformed: {reason}")
