from .extraction import iter_transactions
from .aggregation import aggregate_by_month, normalize_transactions, sort_month_groups
from .query import TransactionQueryService, summarize_accounts

__all__ = [
    "iter_transactions",
    "aggregate_by_month",
    "normalize_transactions",
    "sort_month_groups",
    "TransactionQueryService",
    "summarize_accounts",
]
