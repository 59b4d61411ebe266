"""Flatten embedded transactions out of account documents."""
from typing import Iterable, Iterator, Tuple
from transactions_service.models.account import Account, StoredTransaction


def iter_transactions(accounts: Iterable[Account]) -> Iterator[Tuple[str, StoredTransaction]]:
    """
    Yield ``(account_id, transaction)`` pairs from every account.

    Accounts without transactions (field absent or empty) are skipped.
    Accounts come out in input order, transactions in stored order.
    """
    for account in accounts:
        if not account.has_transactions:
            continue
        for tx in account.transactions:
            yield account.id, tx
