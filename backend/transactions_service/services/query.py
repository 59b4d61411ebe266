"""Query façade: monthly transaction summaries for all accounts or one account."""
import logging
from typing import Callable, Iterable, List

from transactions_service.errors import (
    AccountNotFoundError,
    AggregationError,
    InvalidIdentifierError,
    TransactionsServiceError,
)
from transactions_service.models.account import Account
from transactions_service.models.month_group import MonthGroup
from transactions_service.services.aggregation import (
    aggregate_by_month,
    normalize_transactions,
    sort_month_groups,
)
from transactions_service.services.extraction import iter_transactions
from transactions_service.storage.database import Database
from transactions_service.utils.identifiers import is_valid_account_key

logger = logging.getLogger(__name__)


def summarize_accounts(accounts: Iterable[Account]) -> List[MonthGroup]:
    """Run extraction, date normalization, grouping and ordering over ``accounts``."""
    items = normalize_transactions(iter_transactions(accounts))
    return sort_month_groups(aggregate_by_month(items))


class TransactionQueryService:
    """Entry points used by the HTTP layer. Stateless apart from the database handle."""

    def __init__(self, database: Database):
        self.database = database

    def aggregate_all(self) -> List[MonthGroup]:
        """
        Monthly summaries across every account.

        Raises:
            StorageUnavailableError: If the database is not ready
            AggregationError: On any failure while loading or aggregating
        """
        return self._guarded("all accounts", self._aggregate_all)

    def aggregate_for_account(self, account_key: str) -> List[MonthGroup]:
        """
        Monthly summaries for one account.

        Args:
            account_key: 24-character hexadecimal account key

        Returns:
            Groups for that account; empty if it has no transactions

        Raises:
            StorageUnavailableError: If the database is not ready
            InvalidIdentifierError: If ``account_key`` is malformed
            AccountNotFoundError: If no account has that key
            AggregationError: On any failure while loading or aggregating
        """
        return self._guarded(
            f"account {account_key}",
            lambda: self._aggregate_for_account(account_key),
        )

    def _aggregate_all(self) -> List[MonthGroup]:
        store = self.database.accounts
        return summarize_accounts(store.list_accounts_with_transactions())

    def _aggregate_for_account(self, account_key: str) -> List[MonthGroup]:
        store = self.database.accounts
        if not is_valid_account_key(account_key):
            raise InvalidIdentifierError(account_key)
        account = store.find_account(account_key)
        if account is None:
            raise AccountNotFoundError(account_key)
        return summarize_accounts([account])

    def _guarded(self, scope: str, run: Callable[[], List[MonthGroup]]) -> List[MonthGroup]:
        try:
            return run()
        except AggregationError:
            logger.exception("Aggregation failed", extra={"scope": scope})
            raise
        except TransactionsServiceError:
            # storage unavailable, invalid key, not found
            raise
        except Exception as e:
            logger.exception("Unexpected error while aggregating", extra={"scope": scope})
            raise AggregationError(f"Failed to aggregate transactions for {scope}") from e
