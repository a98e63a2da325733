"""Standard error codes for the booking core.

Nothing in the core raises for these conditions. The codes explain why a
date range cannot be booked or why a booking attempt was deferred, so the
presentation layer can disable an action and show a hint.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Reasons a booking action is unavailable."""

    # Date range error codes (ERR_001-ERR_004)
    INVALID_DATE_RANGE = "ERR_001"
    DATES_UNAVAILABLE = "ERR_002"
    MINIMUM_DAYS_NOT_MET = "ERR_003"
    MAXIMUM_DAYS_EXCEEDED = "ERR_004"

    # Continuation error codes
    AUTH_REQUIRED = "ERR_AUTH_001"
    DRAFT_INVALID = "ERR_DRAFT_001"


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_DATE_RANGE: "Select a start date and an end date after it",
    ErrorCode.DATES_UNAVAILABLE: "Some of the selected dates are not available",
    ErrorCode.MINIMUM_DAYS_NOT_MET: "The rental is shorter than this listing allows",
    ErrorCode.MAXIMUM_DAYS_EXCEEDED: "The rental is longer than this listing allows",
    ErrorCode.AUTH_REQUIRED: "Sign in to continue booking",
    ErrorCode.DRAFT_INVALID: "The saved booking could not be restored",
}

# Recovery suggestions for the presentation layer
ERROR_RECOVERY: dict[ErrorCode, str] = {
    ErrorCode.INVALID_DATE_RANGE: "Pick both dates, with the end after the start",
    ErrorCode.DATES_UNAVAILABLE: "Choose different dates or try a suggested range",
    ErrorCode.MINIMUM_DAYS_NOT_MET: "Extend the rental to the minimum length",
    ErrorCode.MAXIMUM_DAYS_EXCEEDED: "Shorten the rental to the maximum length",
    ErrorCode.AUTH_REQUIRED: "Redirect to sign in and resume afterwards",
    ErrorCode.DRAFT_INVALID: "Ask the renter to pick their dates again",
}


class RangeRejection(BaseModel):
    """Why a candidate date range was rejected."""

    model_config = ConfigDict(strict=True, frozen=True)

    error_code: ErrorCode
    message: str
    recovery: str
    details: Optional[dict[str, str]] = None

    @classmethod
    def from_code(
        cls,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ) -> "RangeRejection":
        """Create a RangeRejection from an error code.

        Args:
            code: The error code
            details: Optional additional context about the rejection

        Returns:
            A RangeRejection with the message and recovery hint for the code.
        """
        return cls(
            error_code=code,
            message=ERROR_MESSAGES[code],
            recovery=ERROR_RECOVERY[code],
            details=details,
        )
