"""Draft models for carrying booking intent across a sign-in redirect.

A renter who starts booking while signed out is sent to authentication.
The draft keeps their selection keyed by listing so the listing view can
restore it once, after they return.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from rental_core.models.enums import ProtectionChoice
from rental_core.models.errors import ErrorCode
from rental_core.models.session import BookingSession


class BookingDraft(BaseModel):
    """Serialized, not-yet-committed booking intent.

    Dates are kept as the raw ISO strings the view held; they are only
    parsed when the draft is consumed.
    """

    model_config = ConfigDict(strict=True)

    listing_id: str = Field(..., min_length=1, description="Listing the draft belongs to")
    start_date: str | None = Field(default=None, description="ISO start date")
    end_date: str | None = Field(default=None, description="ISO end date")
    protection_choice: ProtectionChoice = Field(default=ProtectionChoice.NONE)
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")
    expires_at: int = Field(
        ..., description="Unix epoch timestamp after which the draft is ignored"
    )


class StartBookingOutcome(BaseModel):
    """Result of a booking-start attempt."""

    model_config = ConfigDict(frozen=True)

    session: BookingSession
    redirect_to: str | None = Field(
        default=None, description="Sign-in URL when authentication is required"
    )
    draft_saved: bool = False
    error_code: ErrorCode | None = Field(
        default=None, description="Why the booking did not advance, if it did not"
    )

    @property
    def requires_auth(self) -> bool:
        return self.redirect_to is not None

