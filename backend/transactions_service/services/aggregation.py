"""Monthly grouping of transactions."""
from datetime import datetime
from typing import Dict, Iterable, Iterator, List, Tuple

from transactions_service.errors import InvalidTransactionDateError
from transactions_service.models.account import StoredTransaction
from transactions_service.models.month_group import MonthGroup, MonthGroupItem, MonthKey
from transactions_service.utils.timestamp import normalize_date


def normalize_transactions(
    pairs: Iterable[Tuple[str, StoredTransaction]],
) -> Iterator[MonthGroupItem]:
    """
    Normalize the date of each transaction to a UTC datetime.

    Raises:
        InvalidTransactionDateError: On the first date that cannot be normalized.
            The whole query is rejected rather than dropping the transaction.
    """
    index_by_account: Dict[str, int] = {}
    for account_id, tx in pairs:
        index = index_by_account.get(account_id, 0)
        index_by_account[account_id] = index + 1
        try:
            normalized = normalize_date(tx.date)
        except ValueError as e:
            raise InvalidTransactionDateError(account_id, index, tx.date) from e
        yield MonthGroupItem(type=tx.type, amount=tx.amount, date=normalized)


def month_key(when: datetime) -> Tuple[int, int]:
    """Grouping key: calendar (year, month) in UTC."""
    return when.year, when.month


def aggregate_by_month(items: Iterable[MonthGroupItem]) -> List[MonthGroup]:
    """
    Group normalized transactions by calendar month.

    Returns one group per distinct (year, month), in no particular order.
    Items keep their input order within a group.
    """
    groups: Dict[Tuple[int, int], dict] = {}
    for item in items:
        key = month_key(item.date)
        if key not in groups:
            groups[key] = {"count": 0, "total_amount": 0, "items": []}
        groups[key]["count"] += 1
        groups[key]["total_amount"] += item.amount
        groups[key]["items"].append(item)

    return [
        MonthGroup(
            id=MonthKey(year=year, month=month),
            count=acc["count"],
            total_amount=acc["total_amount"],
            items=acc["items"],
        )
        for (year, month), acc in groups.items()
    ]


def sort_month_groups(groups: Iterable[MonthGroup]) -> List[MonthGroup]:
    """Most recent first: year descending, then month descending."""
    return sorted(groups, key=lambda g: (g.id.year, g.id.month), reverse=True)
