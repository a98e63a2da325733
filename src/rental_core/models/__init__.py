"""Pydantic models for the gear rental booking core."""

from .availability import AvailabilityWindow, BlockOut, ExistingReservation
from .draft import BookingDraft, StartBookingOutcome
from .enums import (
    CANCELLED_RESERVATION_STATUSES,
    ClaimStatus,
    EventType,
    ProtectionChoice,
    ReservationStatus,
    Stage,
    StepId,
    StepStatus,
)
from .errors import ERROR_MESSAGES, ERROR_RECOVERY, ErrorCode, RangeRejection
from .events import (
    TRIP_TIME_OPTIONS,
    ArrangeDropoff,
    ArrangePickup,
    BookingEvent,
    BuyInsurance,
    CancelBooking,
    DeclineProtection,
    OpenClaim,
    PayDeposit,
    RequireAuth,
    Reset,
    ResolveClaim,
    ReturnDeposit,
    SetDates,
    SetTimes,
    StartBooking,
    UploadEvidence,
    WriteReview,
    parse_event,
)
from .journey import JourneyAction, JourneyStep
from .listing import AuthStatus, Listing, ProtectionPolicy
from .quote import Quote
from .session import BookingSession

__all__ = [
    # Enums
    "CANCELLED_RESERVATION_STATUSES",
    "ClaimStatus",
    "EventType",
    "ProtectionChoice",
    "ReservationStatus",
    "Stage",
    "StepId",
    "StepStatus",
    # Errors
    "ERROR_MESSAGES",
    "ERROR_RECOVERY",
    "ErrorCode",
    "RangeRejection",
    # Listing
    "AuthStatus",
    "Listing",
    "ProtectionPolicy",
    # Availability
    "AvailabilityWindow",
    "BlockOut",
    "ExistingReservation",
    # Quote
    "Quote",
    # Session
    "BookingSession",
    # Events
    "TRIP_TIME_OPTIONS",
    "ArrangeDropoff",
    "ArrangePickup",
    "BookingEvent",
    "BuyInsurance",
    "CancelBooking",
    "DeclineProtection",
    "OpenClaim",
    "PayDeposit",
    "RequireAuth",
    "Reset",
    "ResolveClaim",
    "ReturnDeposit",
    "SetDates",
    "SetTimes",
    "StartBooking",
    "UploadEvidence",
    "WriteReview",
    "parse_event",
    # Draft
    "BookingDraft",
    "StartBookingOutcome",
    # Journey
    "JourneyAction",
    "JourneyStep",
]
