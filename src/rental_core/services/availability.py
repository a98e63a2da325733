"""Availability resolver for date selection.

Pure functions over an AvailabilityWindow snapshot that was already
fetched. Nothing here performs I/O or raises for bad input: unparsable
dates are unavailable and malformed block-outs are skipped.
"""

import datetime as dt
from typing import Any

from rental_core.models import AvailabilityWindow, ErrorCode, RangeRejection
from rental_core.utils.dates import day_span, parse_day
from rental_core.utils.logging import get_logger

logger = get_logger(__name__)

DayLike = dt.date | dt.datetime | str | None


def rental_days(start: dt.date, end: dt.date) -> int:
    """Count rental days between two calendar days.

    The same count is used for pricing and for min/max checks: the number
    of day boundaries crossed, so a 1st-to-3rd rental is 2 days.
    """
    return (end - start).days


def is_date_available(day: DayLike, window: AvailabilityWindow) -> bool:
    """Check whether a single calendar day is rentable.

    Args:
        day: Day to check (date, datetime or ISO string)
        window: Availability snapshot for the listing

    Returns:
        False if the day is marked unavailable, falls inside a non-cancelled
        reservation, or inside a block-out (all inclusive). True otherwise.
    """
    check_date = parse_day(day)
    if check_date is None:
        return False

    if check_date in window.unavailable_dates:
        return False

    for reservation in window.active_reservations:
        if reservation.start <= check_date <= reservation.end:
            return False

    for block in window.block_outs:
        if block.start is None or block.end is None:
            continue
        if block.start.date() <= check_date <= block.end.date():
            return False

    return True


def check_range(
    start: DayLike,
    end: DayLike,
    window: AvailabilityWindow,
) -> RangeRejection | None:
    """Explain why a date range cannot be booked.

    Checks run in order: both dates present and end after start, minimum
    and maximum rental length, then every day from start to end inclusive.

    Args:
        start: First rental day
        end: Last rental day
        window: Availability snapshot for the listing

    Returns:
        RangeRejection for the first failing check, or None if bookable
    """
    start_date = parse_day(start)
    end_date = parse_day(end)
    if start_date is None or end_date is None or end_date <= start_date:
        return RangeRejection.from_code(ErrorCode.INVALID_DATE_RANGE)

    total_days = rental_days(start_date, end_date)
    if total_days < window.min_rental_days:
        return RangeRejection.from_code(
            ErrorCode.MINIMUM_DAYS_NOT_MET,
            details={
                "selected_days": str(total_days),
                "min_rental_days": str(window.min_rental_days),
            },
        )
    if window.max_rental_days is not None and total_days > window.max_rental_days:
        return RangeRejection.from_code(
            ErrorCode.MAXIMUM_DAYS_EXCEEDED,
            details={
                "selected_days": str(total_days),
                "max_rental_days": str(window.max_rental_days),
            },
        )

    for day in day_span(start_date, end_date):
        if not is_date_available(day, window):
            return RangeRejection.from_code(
                ErrorCode.DATES_UNAVAILABLE,
                details={"first_unavailable": day.isoformat()},
            )

    return None


def is_range_valid(start: DayLike, end: DayLike, window: AvailabilityWindow) -> bool:
    """Check whether a whole date range is rentable.

    A single unavailable day invalidates the range.
    """
    return check_range(start, end, window) is None


def is_date_selectable(
    day: DayLike,
    window: AvailabilityWindow | None,
    today: dt.date | None = None,
) -> bool:
    """Decide whether the calendar should offer a day.

    Past days are never selectable. While the snapshot is still loading
    (``window`` is None) every present or future day is provisionally
    selectable so the calendar is not blocked.

    Args:
        day: Day rendered by the calendar
        window: Availability snapshot, or None while it is pending
        today: Reference day (defaults to the local current date)

    Returns:
        True if the day can be picked
    """
    check_date = parse_day(day)
    if check_date is None:
        return False
    if check_date < (today or dt.date.today()):
        return False
    if window is None:
        return True
    return is_date_available(check_date, window)


def find_conflicts(
    start: DayLike,
    end: DayLike,
    window: AvailabilityWindow,
) -> list[dt.date]:
    """List the selected days that a snapshot marks unavailable.

    Used when the snapshot arrives after the renter already picked dates.

    Returns:
        Unavailable days between start and end inclusive (empty if the
        selection is incomplete or reversed)
    """
    start_date = parse_day(start)
    end_date = parse_day(end)
    if start_date is None or end_date is None or end_date < start_date:
        return []
    return [d for d in day_span(start_date, end_date) if not is_date_available(d, window)]


def suggest_alternative_ranges(
    requested_start: DayLike,
    requested_end: DayLike,
    window: AvailabilityWindow,
    today: dt.date | None = None,
    search_window_days: int = 14,
    max_suggestions: int = 3,
) -> list[dict[str, Any]]:
    """Find nearby ranges of the same length that can be booked.

    Searches alternately earlier and later than the requested start, closest
    first, and only returns ranges that pass ``is_range_valid``.

    Args:
        requested_start: Originally requested first day
        requested_end: Originally requested last day
        window: Availability snapshot for the listing
        today: Reference day; earlier starts are never suggested
        search_window_days: How many days before/after to search
        max_suggestions: Maximum number of alternatives to return

    Returns:
        List of {"start", "end", "days", "offset_days", "direction"} dicts
    """
    start_date = parse_day(requested_start)
    end_date = parse_day(requested_end)
    if start_date is None or end_date is None or end_date <= start_date:
        return []

    today = today or dt.date.today()
    length = rental_days(start_date, end_date)
    suggestions: list[dict[str, Any]] = []

    for offset in range(1, search_window_days + 1):
        for direction, shift in (("earlier", -offset), ("later", offset)):
            if len(suggestions) >= max_suggestions:
                break
            candidate_start = start_date + dt.timedelta(days=shift)
            if candidate_start < today:
                continue
            candidate_end = candidate_start + dt.timedelta(days=length)
            if is_range_valid(candidate_start, candidate_end, window):
                suggestions.append(
                    {
                        "start": candidate_start.isoformat(),
                        "end": candidate_end.isoformat(),
                        "days": length,
                        "offset_days": shift,
                        "direction": direction,
                    }
                )

    logger.debug(
        "Alternative ranges searched",
        extra={"requested_start": start_date.isoformat(), "found": len(suggestions)},
    )
    return suggestions
