"""
Load account documents into the transactions database.

Run:
  python seed_accounts.py                      # synthetic accounts
  python seed_accounts.py --file users.json    # JSON array of account documents
  python seed_accounts.py --reset              # clear the table first

Native dates in a JSON file use the {"$date": "2024-03-05T00:00:00Z"} wrapper;
plain strings are stored as text and normalized when queried.
"""
import argparse
import datetime
import json
import random
import secrets
import sys
from pathlib import Path

from transactions_service.config import settings
from transactions_service.errors import StorageUnavailableError
from transactions_service.storage.database import Database, decode_document

TRANSACTION_TYPES = ["debit", "credit", "transfer", "fee"]


def generate_accounts(n_accounts: int = 3, months: int = 6, seed: int = 42) -> list:
    """Synthetic accounts with a mix of text and native dates; the last one has no transactions."""
    rng = random.Random(seed)
    today = datetime.datetime.now(datetime.timezone.utc)
    start = today - datetime.timedelta(days=30 * months)
    accounts = []

    for i in range(n_accounts):
        transactions = []
        for _ in range(rng.randint(10, 40)):
            when = start + datetime.timedelta(
                days=rng.randint(0, 30 * months),
                hours=rng.randint(0, 23),
                minutes=rng.randint(0, 59),
            )
            tx_type = rng.choice(TRANSACTION_TYPES)
            amount = round(rng.uniform(5.0, 500.0), 2)
            if tx_type in ("debit", "fee"):
                amount = -amount
            transactions.append({
                "type": tx_type,
                "amount": amount,
                # Half stored as text, half as native dates
                "date": when.strftime("%Y-%m-%dT%H:%M:%SZ") if rng.random() < 0.5 else when,
            })
        accounts.append({
            "_id": secrets.token_hex(12),
            "name": f"Synthetic User {i + 1}",
            "transactions": transactions,
        })

    accounts.append({"_id": secrets.token_hex(12), "name": "No Activity User", "transactions": []})
    return accounts


def load_accounts(path: Path) -> list:
    data = decode_document(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array of account documents")
    return data


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--file", type=Path, help="JSON array of account documents")
    parser.add_argument("--reset", action="store_true", help="delete existing accounts first")
    parser.add_argument("--accounts", type=int, default=3, help="synthetic accounts to generate")
    parser.add_argument("--database-url", default=settings.database_url)
    args = parser.parse_args(argv)

    database = Database(args.database_url)
    try:
        store = database.connect()
    except StorageUnavailableError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.reset:
        print(f"Deleted {store.clear()} existing accounts")

    documents = load_accounts(args.file) if args.file else generate_accounts(args.accounts)
    count = store.insert_accounts(documents)

    print(f"Success. Wrote {count} accounts to {args.database_url}")
    for doc in documents:
        print(f"  {doc['_id']}: {len(doc.get('transactions') or [])} transactions")
    return 0


if __name__ == "__main__":
    sys.exit(main())
