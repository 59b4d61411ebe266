from .timestamp import parse_timestamp, normalize_date
from .identifiers import is_valid_account_key, canonical_account_key

__all__ = ["parse_timestamp", "normalize_date", "is_valid_account_key", "canonical_account_key"]
