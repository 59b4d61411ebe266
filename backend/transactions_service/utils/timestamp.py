"""Timestamp parsing utilities."""
from datetime import date, datetime, time, timezone
from typing import Union

from dateutil import parser

DateValue = Union[str, datetime, date]


def parse_timestamp(s: str) -> datetime:
    """
    Parse a timestamp string into a timezone-aware UTC datetime.

    Supports multiple formats:
    - Date only: "2024-03-05" (midnight)
    - ISO format with "Z" suffix: "2024-01-02T09:10:00Z"
    - ISO format with timezone: "2024-01-02T09:10:00+00:00"
    - ISO format without timezone: "2024-01-02T09:10:00" (assumed UTC)
    - Space-separated: "2024-01-02 09:10:00"

    Args:
        s: Timestamp string

    Returns:
        datetime object in UTC

    Raises:
        ValueError: If timestamp cannot be parsed
    """
    if not s or not s.strip():
        raise ValueError("Empty timestamp string")

    s = s.strip()

    # Convert trailing "Z" to "+00:00" for ISO format compatibility
    iso = s[:-1] + "+00:00" if s.endswith(("Z", "z")) else s

    try:
        return _as_utc(datetime.fromisoformat(iso))
    except ValueError:
        pass

    if " " in iso and "T" not in iso:
        try:
            return _as_utc(datetime.fromisoformat(iso.replace(" ", "T", 1)))
        except ValueError:
            pass

    try:
        return _as_utc(parser.isoparse(s))
    except (ValueError, OverflowError):
        pass

    raise ValueError(
        f"Unable to parse timestamp: {s}. Expected ISO format "
        "(e.g., '2024-01-02', '2024-01-02T09:10:00Z' or '2024-01-02T09:10:00+00:00')"
    )


def normalize_date(value: DateValue) -> datetime:
    """
    Convert a stored date of unknown representation into an aware UTC datetime.

    Text is parsed with ``parse_timestamp``; native datetimes pass through
    (naive ones are taken as UTC) and plain dates become midnight UTC.

    Raises:
        ValueError: If the value is unparseable text or not a date at all
    """
    if isinstance(value, str):
        return parse_timestamp(value)
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    raise ValueError(f"Unsupported date value of type {type(value).__name__}: {value!r}")


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
