"""Journey projector: display-ready steps derived from a booking session.

Everything here is a read-only function of (session, listing), recomputed
on every render.
"""

from rental_core.models import (
    ArrangeDropoff,
    ArrangePickup,
    BookingSession,
    BuyInsurance,
    CancelBooking,
    ClaimStatus,
    DeclineProtection,
    JourneyAction,
    JourneyStep,
    Listing,
    OpenClaim,
    PayDeposit,
    ProtectionChoice,
    Reset,
    ResolveClaim,
    ReturnDeposit,
    Stage,
    StartBooking,
    StepId,
    StepStatus,
    UploadEvidence,
    WriteReview,
)

STAGE_RANK: dict[Stage, int] = {
    Stage.DETAILS: 0,
    Stage.PAYMENT: 1,
    Stage.CONFIRMED: 2,
    Stage.PICKUP: 3,
    Stage.DROPOFF: 4,
    Stage.EVIDENCE: 5,
    Stage.RESOLUTION: 6,
    Stage.REVIEW: 7,
    Stage.COMPLETED: 8,
    Stage.CANCELLED: 9,
}

STEP_RANK: dict[StepId, int] = {
    StepId.DETAILS: 0,
    StepId.PROTECTION: 1,
    StepId.CONFIRMATION: 2,
    StepId.PICKUP: 3,
    StepId.DROPOFF: 4,
    StepId.EVIDENCE: 5,
    StepId.RESOLUTION: 6,
    StepId.REVIEW: 7,
    StepId.BROWSE: 8,
}

STATUS_LABELS: dict[StepStatus, str] = {
    StepStatus.COMPLETE: "Done",
    StepStatus.CURRENT: "Current",
    StepStatus.UPCOMING: "Upcoming",
    StepStatus.CANCELLED: "Cancelled",
}

# Steps that never happen once a booking is cancelled
_TRIP_STEPS = frozenset(
    {StepId.PICKUP, StepId.DROPOFF, StepId.EVIDENCE, StepId.RESOLUTION, StepId.REVIEW}
)
_CANCELLED_VISIBLE = frozenset(
    {StepId.DETAILS, StepId.PROTECTION, StepId.CONFIRMATION, StepId.BROWSE}
)


def format_currency(value: int | None) -> str | None:
    """Format whole dollars, e.g. 1500 -> "$1,500"."""
    if value is None:
        return None
    return f"${value:,}"


def step_status(session: BookingSession, step: StepId) -> StepStatus:
    """Status of one step given the session's stage."""
    if session.stage == Stage.CANCELLED:
        if step == StepId.CONFIRMATION:
            return StepStatus.CANCELLED
        if step in _TRIP_STEPS:
            return StepStatus.UPCOMING
        if step == StepId.BROWSE:
            return StepStatus.CURRENT
        return StepStatus.COMPLETE

    if session.stage == Stage.COMPLETED and step == StepId.BROWSE:
        return StepStatus.CURRENT

    current = STAGE_RANK[session.stage]
    position = STEP_RANK[step]
    if current > position:
        return StepStatus.COMPLETE
    if current == position:
        return StepStatus.CURRENT
    return StepStatus.UPCOMING


def _protection_description(session: BookingSession, listing: Listing) -> str:
    policy = listing.protection
    deposit = format_currency(policy.deposit_amount)
    insurance = format_currency(policy.insurance_daily_price)

    if not policy.requires_protection:
        return (
            "No mandatory deposit for this listing. Confirm when you're ready; "
            "optional coverage is still available."
        )
    if session.stage == Stage.PAYMENT:
        if deposit:
            return f"Choose a {deposit} refundable deposit or add insurance before confirmation."
        return "Pick the insurance option to move forward."
    if session.protection_choice == ProtectionChoice.DEPOSIT and deposit:
        return f"{deposit} deposit authorized and ready for release after dropoff."
    if session.protection_choice == ProtectionChoice.INSURANCE and insurance:
        return f"Insurance active from {insurance} per day for accidental damage coverage."
    return "Protection requirement satisfied. You're ready for confirmation."


def _pickup_description(session: BookingSession) -> str:
    if session.stage == Stage.PICKUP:
        return "Pickup window locked in. Bring ID and arrive a few minutes early for gear checks."
    if session.stage == Stage.CANCELLED:
        return "Pickup skipped because the booking was cancelled."
    if STAGE_RANK[session.stage] > STAGE_RANK[Stage.PICKUP]:
        return "Pickup completed. You're out on your adventure!"
    return "Coordinate the meetup location and time with the owner before your trip."


def _dropoff_description(session: BookingSession) -> str:
    if session.stage == Stage.DROPOFF:
        return "Dropoff window scheduled. Keep the gear clean and dry before returning."
    if session.stage == Stage.CANCELLED:
        return "No dropoff needed due to cancellation."
    if STAGE_RANK[session.stage] > STAGE_RANK[Stage.DROPOFF]:
        return "Dropoff complete. Time to document the gear condition."
    return "Confirm where and when you'll return the gear to the owner."


def _evidence_description(session: BookingSession) -> str:
    if session.stage == Stage.EVIDENCE:
        return (
            "Snap a few photos or a short video so there's a clear record "
            "of the gear's condition."
        )
    if session.stage == Stage.CANCELLED:
        return "No evidence needed because the trip didn't take place."
    if STAGE_RANK[session.stage] > STAGE_RANK[Stage.EVIDENCE]:
        return "Return evidence captured. The owner can now review and release protection."
    return "Once you're back, record the gear condition before closing out the trip."


def _resolution_description(session: BookingSession) -> str:
    if session.claim_status == ClaimStatus.PENDING:
        return "Claim submitted. Sit tight while insurance reviews your evidence."
    if session.claim_status == ClaimStatus.APPROVED:
        return "Claim approved and refunds are on their way."
    if session.claim_status == ClaimStatus.REJECTED:
        return "Claim rejected. Support will follow up with additional guidance."
    if session.deposit_returned:
        return "Deposit released back to your card within 1-3 business days."
    return "Return the deposit or start a claim if something wasn't quite right."


def _review_description(session: BookingSession) -> str:
    if session.stage == Stage.COMPLETED or session.review_submitted:
        return "Thanks for sharing feedback. It helps other renters know what to expect."
    if session.stage == Stage.CANCELLED:
        return "Trip ended early. Feel free to leave feedback for the owner."
    return "Wrap up the trip by rating the gear and the handoff experience."


def project_journey(session: BookingSession, listing: Listing) -> list[JourneyStep]:
    """Build the ordered journey steps for display.

    Args:
        session: Current booking session
        listing: Listing being booked

    Returns:
        Nine steps from reviewing details to browsing more gear
    """
    if session.stage == Stage.CANCELLED and session.refund_issued:
        confirmation = "Booking cancelled and refund initiated to your original payment method."
    else:
        confirmation = "Booking confirmation includes calendar reminders and owner contact details."

    if session.stage == Stage.CANCELLED:
        browse = "Head back to Browse to find another adventure when you're ready."
    else:
        browse = "All wrapped! Explore new listings for your next outing."

    content: list[tuple[StepId, str, str]] = [
        (
            StepId.DETAILS,
            "Review listing details",
            "Look through highlights, what's included, and pickup notes so you "
            "know exactly what will be waiting for you.",
        ),
        (StepId.PROTECTION, "Secure protection", _protection_description(session, listing)),
        (StepId.CONFIRMATION, "Receive confirmation", confirmation),
        (StepId.PICKUP, "Arrange pickup", _pickup_description(session)),
        (StepId.DROPOFF, "Arrange dropoff", _dropoff_description(session)),
        (StepId.EVIDENCE, "Upload return evidence", _evidence_description(session)),
        (StepId.RESOLUTION, "Deposits & claims", _resolution_description(session)),
        (StepId.REVIEW, "Share a review", _review_description(session)),
        (StepId.BROWSE, "Browse more gear", browse),
    ]

    return [
        JourneyStep(
            id=step_id,
            title=title,
            description=description,
            status=step_status(session, step_id),
        )
        for step_id, title, description in content
    ]


def visible_steps(steps: list[JourneyStep], session: BookingSession) -> list[JourneyStep]:
    """Trim the journey to what the tracker shows.

    Cancelled bookings show what happened up to the cancellation, completed
    bookings show everything, and active bookings show the current step
    plus up to two upcoming ones.
    """
    if session.stage == Stage.CANCELLED:
        return [s for s in steps if s.id in _CANCELLED_VISIBLE]
    if session.stage == Stage.COMPLETED:
        return list(steps)
    horizon = STAGE_RANK[session.stage] + 2
    return [s for s in steps if STEP_RANK[s.id] <= horizon]


def protection_summary(listing: Listing) -> str:
    """One-line protection requirement shown next to the booking button."""
    policy = listing.protection
    if policy.requires_protection:
        return "A refundable deposit or insurance is required before pickup."
    if policy.insurance_daily_price:
        return "Insurance is optional for this listing. Book instantly when you're ready."
    return "Book instantly with no additional protection requirements."


def available_actions(session: BookingSession, listing: Listing) -> list[JourneyAction]:
    """Actions the renter can take in the current stage.

    Every action carries the event to submit; secondary actions are marked
    ``primary=False``.
    """
    policy = listing.protection
    stage = session.stage

    if stage == Stage.DETAILS:
        return [
            JourneyAction(
                label=f"Book {listing.title}",
                event=StartBooking(requires_protection=policy.requires_protection),
            )
        ]

    if stage == Stage.PAYMENT:
        actions = []
        if policy.deposit_amount:
            actions.append(
                JourneyAction(
                    label=f"Pay {format_currency(policy.deposit_amount)} refundable deposit",
                    event=PayDeposit(),
                )
            )
        if policy.insurance_daily_price:
            actions.append(
                JourneyAction(
                    label=f"Buy insurance from {format_currency(policy.insurance_daily_price)}/day",
                    event=BuyInsurance(),
                )
            )
        actions.append(
            JourneyAction(label="Decide later", event=DeclineProtection(), primary=False)
        )
        return actions

    if stage == Stage.CONFIRMED:
        return [
            JourneyAction(label="Arrange pickup", event=ArrangePickup()),
            JourneyAction(label="Cancel booking", event=CancelBooking(), primary=False),
        ]

    if stage == Stage.PICKUP:
        return [
            JourneyAction(label="Pickup completed", event=ArrangeDropoff()),
            JourneyAction(label="Cancel booking", event=CancelBooking(), primary=False),
        ]

    if stage == Stage.DROPOFF:
        return [JourneyAction(label="Upload return photos", event=UploadEvidence())]

    if stage == Stage.EVIDENCE:
        release_label = (
            "Release deposit"
            if session.protection_choice == ProtectionChoice.DEPOSIT
            else "Mark return complete"
        )
        return [
            JourneyAction(label=release_label, event=ReturnDeposit()),
            JourneyAction(label="Open a claim", event=OpenClaim(), primary=False),
        ]

    if stage == Stage.RESOLUTION:
        return [
            JourneyAction(label="Mark claim approved", event=ResolveClaim(outcome="approved")),
            JourneyAction(
                label="Mark claim rejected",
                event=ResolveClaim(outcome="rejected"),
                primary=False,
            ),
        ]

    if stage == Stage.REVIEW:
        return [JourneyAction(label="Write review", event=WriteReview())]

    if stage == Stage.COMPLETED:
        return [
            JourneyAction(
                label="Plan another trip with this gear", event=Reset(title=listing.title)
            )
        ]

    return [
        JourneyAction(label="Start over with this listing", event=Reset(title=listing.title))
    ]
