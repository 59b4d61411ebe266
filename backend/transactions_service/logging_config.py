"""Logging setup: terminal output with structured extras."""
import json
import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Attributes every LogRecord carries; anything else on a record came from ``extra=``
_RECORD_ATTRIBUTES = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))) | {
    "message",
    "asctime",
}


def record_extras(record: logging.LogRecord) -> dict:
    """Fields passed via ``extra=`` (e.g. ``scope``, ``database_url``), sorted by name."""
    return {k: v for k, v in sorted(vars(record).items()) if k not in _RECORD_ATTRIBUTES}


class ExtraFormatter(logging.Formatter):
    """Formatter that appends ``extra=`` fields as a JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = record_extras(record)
        if not extras:
            return base
        return f"{base} | {json.dumps(extras, default=str)}"


def configure_logging(level: str = "INFO") -> None:
    """Install the root handler once; later calls leave existing handlers alone."""
    if logging.root.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(ExtraFormatter(LOG_FORMAT))
    logging.basicConfig(level=level.upper(), handlers=[handler])
