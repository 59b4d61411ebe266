"""External account key validation."""
import re
from typing import Optional

_ACCOUNT_KEY_RE = re.compile(r"^[a-fA-F0-9]{24}$")


def is_valid_account_key(key: Optional[str]) -> bool:
    """Return True if ``key`` is exactly 24 hexadecimal characters."""
    return bool(key) and _ACCOUNT_KEY_RE.fullmatch(key) is not None


def canonical_account_key(key: str) -> str:
    """Keys are case-insensitive; storage holds them in lowercase."""
    return key.lower()
