"""Time utilities for timezone-aware UTC datetimes."""

from datetime import UTC, date, datetime


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime for defaults and onupdate hooks."""
    return datetime.now(UTC)


def as_date(value: date | datetime | None) -> date | None:
    """Collapse datetimes to their calendar date; plain dates pass through."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    return value
