"""Calendar-day helpers shared by the resolver, the calculator and drafts."""

import datetime as dt
from typing import Any


def parse_day(value: Any) -> dt.date | None:
    """Normalize a date, datetime or ISO string to a calendar day.

    Args:
        value: Candidate day (date, datetime, or ISO-8601 string)

    Returns:
        The calendar day, or None if the value cannot be parsed
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return dt.date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return dt.datetime.fromisoformat(text).date()
    except ValueError:
        return None


def parse_instant(value: Any) -> dt.datetime | None:
    """Parse a block-out boundary into a datetime.

    Plain dates are treated as midnight of that day.
    """
    if isinstance(value, dt.datetime):
        return value
    if isinstance(value, dt.date):
        return dt.datetime.combine(value, dt.time.min)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return dt.datetime.fromisoformat(value.strip())
    except ValueError:
        return None


def day_span(start: dt.date, end: dt.date) -> list[dt.date]:
    """Generate every calendar day from start to end (both inclusive)."""
    return [start + dt.timedelta(days=i) for i in range((end - start).days + 1)]
