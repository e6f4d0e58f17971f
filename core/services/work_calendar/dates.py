from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional

from core.exceptions import InvalidDateError, MissingInputError


def coerce_date(value: Any, field: str = "Date") -> date:
    """
    Normalise a date-like value to ``datetime.date``.

    Accepts ``date``, ``datetime`` (truncated to its calendar day) and
    ISO-8601 strings, either ``YYYY-MM-DD`` or a full timestamp such as
    ``2024-01-15T00:00:00.000Z``.
    """
    if value is None or value == "":
        raise MissingInputError(f"{field} is required")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            raise InvalidDateError(f"{field} is not a valid date: {value!r}") from None
    raise InvalidDateError(f"{field} is not a valid date: {value!r}")


def parse_optional_date(value: Any, field: str = "Date") -> Optional[date]:
    if value is None or value == "":
        return None
    return coerce_date(value, field)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def coerce_timestamp(value: Any) -> datetime:
    """Parse a stored timestamp; missing values default to now (UTC)."""
    if value is None or value == "":
        return utc_now()
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            raise InvalidDateError(f"Invalid timestamp: {value!r}") from None
    raise InvalidDateError(f"Invalid timestamp: {value!r}")


def format_timestamp(value: datetime) -> str:
    return value.isoformat()


__all__ = [
    "coerce_date",
    "parse_optional_date",
    "utc_now",
    "coerce_timestamp",
    "format_timestamp",
]
