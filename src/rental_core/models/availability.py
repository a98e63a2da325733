"""Availability snapshot models.

An AvailabilityWindow is fetched once per listing view and treated as a
consistent, read-only snapshot for the rest of the session.
"""

import datetime as dt
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from rental_core.models.enums import CANCELLED_RESERVATION_STATUSES
from rental_core.utils.dates import parse_day, parse_instant


def _as_list(value: Any) -> list[Any]:
    """Stored collections may be a list, a single mapping, or junk."""
    if isinstance(value, list):
        return value
    if isinstance(value, dict):
        return [value]
    return []


def _day_limit(value: Any) -> int | None:
    """A positive whole number of days, or None if the value is unusable."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal, str)):
        return None
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    if not number.is_finite() or number != number.to_integral_value() or number < 1:
        return None
    return int(number)


class BlockOut(BaseModel):
    """Owner-defined interval during which the listing is not rentable.

    Either boundary may be missing in stored data; such entries are
    ignored by the resolver.
    """

    model_config = ConfigDict(frozen=True)

    start: dt.datetime | None = None
    end: dt.datetime | None = None
    reason: str | None = None

    @property
    def is_complete(self) -> bool:
        return self.start is not None and self.end is not None


class ExistingReservation(BaseModel):
    """A reservation already holding the listing."""

    model_config = ConfigDict(frozen=True)

    start: dt.date = Field(..., description="First rental day")
    end: dt.date = Field(..., description="Last rental day (inclusive)")
    status: str = Field(default="confirmed")

    @property
    def is_cancelled(self) -> bool:
        return self.status in CANCELLED_RESERVATION_STATUSES


class AvailabilityWindow(BaseModel):
    """Aggregated per-listing availability snapshot."""

    model_config = ConfigDict(frozen=True)

    unavailable_dates: frozenset[dt.date] = Field(default_factory=frozenset)
    block_outs: tuple[BlockOut, ...] = ()
    reservations: tuple[ExistingReservation, ...] = ()
    min_rental_days: int = Field(default=1, ge=1)
    max_rental_days: int | None = Field(default=None, ge=1)

    @property
    def active_reservations(self) -> list[ExistingReservation]:
        """Reservations that still hold dates."""
        return [r for r in self.reservations if not r.is_cancelled]

    @classmethod
    def from_record(cls, record: dict[str, Any] | None) -> "AvailabilityWindow":
        """Build a window from the raw aggregated listing record.

        Expects the shape returned by the availability fetch:
        ``unavailable_dates``, ``block_out_times``, ``existing_bookings``
        (``rental_start_date``/``rental_end_date``/``status``),
        ``min_rental_days`` and ``max_rental_days``. Entries that cannot be
        parsed are dropped rather than failing the whole snapshot.

        Args:
            record: Raw availability record (None when nothing was found)

        Returns:
            AvailabilityWindow snapshot
        """
        if not isinstance(record, dict):
            record = {}

        unavailable: set[dt.date] = set()
        for raw_day in _as_list(record.get("unavailable_dates")):
            day = parse_day(raw_day)
            if day is not None:
                unavailable.add(day)

        block_outs: list[BlockOut] = []
        for entry in _as_list(record.get("block_out_times")):
            if not isinstance(entry, dict):
                continue
            block_outs.append(
                BlockOut(
                    start=parse_instant(entry.get("start", entry.get("start_time"))),
                    end=parse_instant(entry.get("end", entry.get("end_time"))),
                    reason=entry.get("reason") if isinstance(entry.get("reason"), str) else None,
                )
            )

        reservations: list[ExistingReservation] = []
        for booking in _as_list(record.get("existing_bookings")):
            if not isinstance(booking, dict):
                continue
            start = parse_day(booking.get("rental_start_date"))
            end = parse_day(booking.get("rental_end_date"))
            if start is None or end is None:
                continue
            reservations.append(
                ExistingReservation(
                    start=start,
                    end=end,
                    status=str(booking.get("status") or "confirmed"),
                )
            )

        # Missing or unusable constraints fall back to the defaults
        min_days = _day_limit(record.get("min_rental_days")) or 1
        max_days = _day_limit(record.get("max_rental_days"))
        if max_days is not None and max_days < min_days:
            max_days = None

        return cls(
            unavailable_dates=frozenset(unavailable),
            block_outs=tuple(block_outs),
            reservations=tuple(reservations),
            min_rental_days=min_days,
            max_rental_days=max_days,
        )
