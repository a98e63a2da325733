"""Booking session state owned by a single listing view."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, model_validator

from rental_core.models.enums import ClaimStatus, ProtectionChoice, Stage

DEFAULT_TRIP_TIME = "10:00"

# Stages in which a protection choice may be held
PROTECTED_STAGES = frozenset(
    {
        Stage.CONFIRMED,
        Stage.PICKUP,
        Stage.DROPOFF,
        Stage.EVIDENCE,
        Stage.RESOLUTION,
        Stage.REVIEW,
        Stage.COMPLETED,
    }
)

TERMINAL_STAGES = frozenset({Stage.COMPLETED, Stage.CANCELLED})


class BookingSession(BaseModel):
    """State of one rental's journey through the lifecycle machine.

    Ephemeral: created when a listing view opens, reset when the listing
    changes, discarded when the view closes. Instances are immutable; the
    machine returns a new session for every accepted event.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    stage: Stage = Stage.DETAILS
    protection_choice: ProtectionChoice = ProtectionChoice.NONE
    refund_issued: bool = False
    deposit_returned: bool = False
    claim_status: ClaimStatus = ClaimStatus.NONE
    review_submitted: bool = False
    history: tuple[str, ...] = Field(
        default=(), description="Append-only narration of accepted transitions"
    )
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    start_time: str = DEFAULT_TRIP_TIME
    end_time: str = DEFAULT_TRIP_TIME

    @model_validator(mode="after")
    def validate_protection_stage(self) -> "BookingSession":
        """A protection choice only exists once the booking is confirmed."""
        if (
            self.protection_choice != ProtectionChoice.NONE
            and self.stage not in PROTECTED_STAGES
        ):
            raise ValueError(
                f"protection_choice must be none in stage {self.stage.value}"
            )
        return self

    @property
    def is_terminal(self) -> bool:
        return self.stage in TERMINAL_STAGES
