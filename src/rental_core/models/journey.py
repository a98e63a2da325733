"""Display models produced by the journey projector."""

from pydantic import BaseModel, ConfigDict

from rental_core.models.enums import StepId, StepStatus
from rental_core.models.events import BookingEvent


class JourneyStep(BaseModel):
    """One phase of the rental as shown to the renter."""

    model_config = ConfigDict(strict=True, frozen=True)

    id: StepId
    title: str
    description: str
    status: StepStatus


class JourneyAction(BaseModel):
    """A button the renter can press in the current stage."""

    model_config = ConfigDict(frozen=True)

    label: str
    event: BookingEvent
    primary: bool = True
