from .account import Account, StoredTransaction
from .month_group import (
    MonthKey,
    MonthGroupItem,
    MonthGroup,
    StatusResponse,
    ErrorResponse,
)

__all__ = [
    "Account",
    "StoredTransaction",
    "MonthKey",
    "MonthGroupItem",
    "MonthGroup",
    "StatusResponse",
    "ErrorResponse",
]
