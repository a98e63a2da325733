"""Events submitted to the booking lifecycle machine.

Events arrive from user-interface callbacks, so they validate in lax mode
and can be parsed from plain dicts with ``parse_event``.
"""

import datetime as dt
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


def _trip_time_options() -> list[tuple[str, str]]:
    """Half-hour pickup/return slots from 09:00 to 21:30 as (value, label)."""
    options = []
    for hour in range(9, 22):
        for minute in (0, 30):
            hour12 = hour - 12 if hour > 12 else hour
            period = "p.m." if hour >= 12 else "a.m."
            options.append((f"{hour:02d}:{minute:02d}", f"{hour12}:{minute:02d} {period}"))
    return options


TRIP_TIME_OPTIONS: list[tuple[str, str]] = _trip_time_options()
TRIP_TIME_VALUES = frozenset(value for value, _ in TRIP_TIME_OPTIONS)


class _Event(BaseModel):
    model_config = ConfigDict(frozen=True)


class StartBooking(_Event):
    type: Literal["START_BOOKING"] = "START_BOOKING"
    requires_protection: bool


class PayDeposit(_Event):
    type: Literal["PAY_DEPOSIT"] = "PAY_DEPOSIT"


class BuyInsurance(_Event):
    type: Literal["BUY_INSURANCE"] = "BUY_INSURANCE"


class DeclineProtection(_Event):
    type: Literal["DECLINE_PROTECTION"] = "DECLINE_PROTECTION"


class CancelBooking(_Event):
    type: Literal["CANCEL_BOOKING"] = "CANCEL_BOOKING"


class ArrangePickup(_Event):
    type: Literal["ARRANGE_PICKUP"] = "ARRANGE_PICKUP"


class ArrangeDropoff(_Event):
    type: Literal["ARRANGE_DROPOFF"] = "ARRANGE_DROPOFF"


class UploadEvidence(_Event):
    type: Literal["UPLOAD_EVIDENCE"] = "UPLOAD_EVIDENCE"


class ReturnDeposit(_Event):
    type: Literal["RETURN_DEPOSIT"] = "RETURN_DEPOSIT"


class OpenClaim(_Event):
    type: Literal["OPEN_CLAIM"] = "OPEN_CLAIM"


class ResolveClaim(_Event):
    type: Literal["RESOLVE_CLAIM"] = "RESOLVE_CLAIM"
    outcome: Literal["approved", "rejected"]


class WriteReview(_Event):
    type: Literal["WRITE_REVIEW"] = "WRITE_REVIEW"


class Reset(_Event):
    type: Literal["RESET"] = "RESET"
    title: str


class SetDates(_Event):
    """Replace the selected dates. None clears a date."""

    type: Literal["SET_DATES"] = "SET_DATES"
    start_date: dt.date | None = None
    end_date: dt.date | None = None


class SetTimes(_Event):
    """Change pickup/return times. None keeps the current value."""

    type: Literal["SET_TIMES"] = "SET_TIMES"
    start_time: str | None = None
    end_time: str | None = None

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_slot(cls, v: str | None) -> str | None:
        """Only the half-hour trip slots can be chosen."""
        if v is not None and v not in TRIP_TIME_VALUES:
            raise ValueError(f"{v!r} is not a bookable trip time")
        return v


class RequireAuth(_Event):
    type: Literal["REQUIRE_AUTH"] = "REQUIRE_AUTH"


BookingEvent = Annotated[
    Union[
        StartBooking,
        PayDeposit,
        BuyInsurance,
        DeclineProtection,
        CancelBooking,
        ArrangePickup,
        ArrangeDropoff,
        UploadEvidence,
        ReturnDeposit,
        OpenClaim,
        ResolveClaim,
        WriteReview,
        Reset,
        SetDates,
        SetTimes,
        RequireAuth,
    ],
    Field(discriminator="type"),
]

_event_adapter: TypeAdapter[Any] = TypeAdapter(BookingEvent)


def parse_event(payload: dict[str, Any]) -> BookingEvent:
    """Validate a UI payload such as ``{"type": "PAY_DEPOSIT"}`` into an event.

    Raises:
        pydantic.ValidationError: If the payload is not a known event
    """
    event: BookingEvent = _event_adapter.validate_python(payload)
    return event
