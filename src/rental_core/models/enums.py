"""Enumeration types for the booking core data models."""

from enum import Enum


class Stage(str, Enum):
    """Discrete phase of a booking session."""

    DETAILS = "details"
    PAYMENT = "payment"
    CONFIRMED = "confirmed"
    PICKUP = "pickup"
    DROPOFF = "dropoff"
    EVIDENCE = "evidence"
    RESOLUTION = "resolution"
    REVIEW = "review"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ProtectionChoice(str, Enum):
    """Protection selected for the trip."""

    NONE = "none"
    DEPOSIT = "deposit"
    INSURANCE = "insurance"


class ClaimStatus(str, Enum):
    """Status of a damage claim."""

    NONE = "none"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class EventType(str, Enum):
    """Events accepted by the lifecycle machine."""

    START_BOOKING = "START_BOOKING"
    PAY_DEPOSIT = "PAY_DEPOSIT"
    BUY_INSURANCE = "BUY_INSURANCE"
    DECLINE_PROTECTION = "DECLINE_PROTECTION"
    CANCEL_BOOKING = "CANCEL_BOOKING"
    ARRANGE_PICKUP = "ARRANGE_PICKUP"
    ARRANGE_DROPOFF = "ARRANGE_DROPOFF"
    UPLOAD_EVIDENCE = "UPLOAD_EVIDENCE"
    RETURN_DEPOSIT = "RETURN_DEPOSIT"
    OPEN_CLAIM = "OPEN_CLAIM"
    RESOLVE_CLAIM = "RESOLVE_CLAIM"
    WRITE_REVIEW = "WRITE_REVIEW"
    RESET = "RESET"
    SET_DATES = "SET_DATES"
    SET_TIMES = "SET_TIMES"
    REQUIRE_AUTH = "REQUIRE_AUTH"


class StepId(str, Enum):
    """Identifier of a journey step shown to the renter."""

    DETAILS = "details"
    PROTECTION = "protection"
    CONFIRMATION = "confirmation"
    PICKUP = "pickup"
    DROPOFF = "dropoff"
    EVIDENCE = "evidence"
    RESOLUTION = "resolution"
    REVIEW = "review"
    BROWSE = "browse"


class StepStatus(str, Enum):
    """Display status of a journey step."""

    COMPLETE = "complete"
    CURRENT = "current"
    UPCOMING = "upcoming"
    CANCELLED = "cancelled"


class ReservationStatus(str, Enum):
    """Status of an existing reservation in an availability snapshot."""

    PENDING_APPROVAL = "pending_approval"
    CONFIRMED = "confirmed"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"  # Legacy rows
    CANCELLED_BY_RENTER = "cancelled_by_renter"
    CANCELLED_BY_OWNER = "cancelled_by_owner"
    DISPUTED = "disputed"


CANCELLED_RESERVATION_STATUSES = frozenset(
    {
        ReservationStatus.CANCELLED.value,
        ReservationStatus.CANCELLED_BY_RENTER.value,
        ReservationStatus.CANCELLED_BY_OWNER.value,
    }
)
