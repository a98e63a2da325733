"""Booking lifecycle state machine.

The machine is a pure transition function over immutable BookingSession
values. Every event has a guard; an event whose guard fails returns the
same session object, so duplicated, replayed or out-of-order events from
UI callbacks are harmless. Each accepted transition appends exactly one
sentence to the session history (SET_DATES and SET_TIMES only update
fields).
"""

from typing import Any, Callable

from rental_core.models import (
    BookingEvent,
    BookingSession,
    ClaimStatus,
    EventType,
    ProtectionChoice,
    Stage,
)
from rental_core.models.events import ResolveClaim, Reset, SetDates, SetTimes, StartBooking
from rental_core.utils.logging import get_logger, log_transition

logger = get_logger(__name__)

ANY_STAGE = frozenset(Stage)

# Stages each event is accepted from
VALID_FROM: dict[EventType, frozenset[Stage]] = {
    EventType.START_BOOKING: frozenset({Stage.DETAILS}),
    EventType.PAY_DEPOSIT: frozenset({Stage.PAYMENT}),
    EventType.BUY_INSURANCE: frozenset({Stage.PAYMENT}),
    EventType.DECLINE_PROTECTION: frozenset({Stage.PAYMENT}),
    EventType.CANCEL_BOOKING: frozenset({Stage.CONFIRMED, Stage.PICKUP}),
    EventType.ARRANGE_PICKUP: frozenset({Stage.CONFIRMED}),
    EventType.ARRANGE_DROPOFF: frozenset({Stage.PICKUP}),
    EventType.UPLOAD_EVIDENCE: frozenset({Stage.DROPOFF}),
    EventType.RETURN_DEPOSIT: frozenset({Stage.EVIDENCE, Stage.RESOLUTION}),
    EventType.OPEN_CLAIM: frozenset({Stage.EVIDENCE}),
    EventType.RESOLVE_CLAIM: frozenset({Stage.RESOLUTION}),
    EventType.WRITE_REVIEW: frozenset({Stage.REVIEW}),
    EventType.RESET: ANY_STAGE,
    EventType.SET_DATES: ANY_STAGE,
    EventType.SET_TIMES: ANY_STAGE,
    EventType.REQUIRE_AUTH: ANY_STAGE,
}


def create_session(title: str) -> BookingSession:
    """Create a fresh session for a listing view."""
    return BookingSession(history=(f"Reviewing {title} before booking.",))


def reset_if_listing_changed(
    session: BookingSession,
    current_id: str,
    last_id: str | None,
    title: str,
) -> BookingSession:
    """Start over when the view switches to a different listing.

    Args:
        session: Session held by the view
        current_id: Listing now being viewed
        last_id: Listing the session was created for
        title: Title of the current listing

    Returns:
        A fresh session if the listing changed, else the same session
    """
    if current_id == last_id:
        return session
    logger.info(
        "Listing changed, booking session reset",
        extra={"listing_id": current_id, "previous_listing_id": last_id},
    )
    return create_session(title)


class BookingLifecycleMachine:
    """Guarded transitions for a single rental's booking journey."""

    def __init__(self) -> None:
        # Each handler receives the event class matching its key
        self._handlers: dict[EventType, Callable[[BookingSession, Any], BookingSession]] = {
            EventType.START_BOOKING: self._start_booking,
            EventType.PAY_DEPOSIT: self._pay_deposit,
            EventType.BUY_INSURANCE: self._buy_insurance,
            EventType.DECLINE_PROTECTION: self._decline_protection,
            EventType.CANCEL_BOOKING: self._cancel_booking,
            EventType.ARRANGE_PICKUP: self._arrange_pickup,
            EventType.ARRANGE_DROPOFF: self._arrange_dropoff,
            EventType.UPLOAD_EVIDENCE: self._upload_evidence,
            EventType.RETURN_DEPOSIT: self._return_deposit,
            EventType.OPEN_CLAIM: self._open_claim,
            EventType.RESOLVE_CLAIM: self._resolve_claim,
            EventType.WRITE_REVIEW: self._write_review,
            EventType.RESET: self._reset,
            EventType.SET_DATES: self._set_dates,
            EventType.SET_TIMES: self._set_times,
            EventType.REQUIRE_AUTH: self._require_auth,
        }

    def is_allowed(self, session: BookingSession, event_type: EventType) -> bool:
        """Check an event's guard against the session."""
        if session.stage not in VALID_FROM[event_type]:
            return False
        if event_type == EventType.RESOLVE_CLAIM:
            return session.claim_status == ClaimStatus.PENDING
        return True

    def transition(self, session: BookingSession, event: BookingEvent) -> BookingSession:
        """Apply one event to a session.

        Args:
            session: Current session
            event: Submitted event

        Returns:
            The new session, or the same session object if the guard failed
        """
        event_type = EventType(event.type)
        if not self.is_allowed(session, event_type):
            log_transition(
                logger,
                event_type.value,
                from_stage=session.stage.value,
                accepted=False,
            )
            return session

        updated = self._handlers[event_type](session, event)
        log_transition(
            logger,
            event_type.value,
            from_stage=session.stage.value,
            to_stage=updated.stage.value,
        )
        return updated

    # Handlers run only after the guard admitted the event

    @staticmethod
    def _advance(
        session: BookingSession,
        stage: Stage,
        entry: str,
        **updates: object,
    ) -> BookingSession:
        return session.model_copy(
            update={"stage": stage, "history": session.history + (entry,), **updates}
        )

    def _start_booking(self, session: BookingSession, event: StartBooking) -> BookingSession:
        if event.requires_protection:
            return self._advance(
                session,
                Stage.PAYMENT,
                "Started checkout. Protection is required before pickup.",
                refund_issued=False,
            )
        return self._advance(
            session,
            Stage.CONFIRMED,
            "Booking confirmed instantly. No deposit required.",
            refund_issued=False,
        )

    def _pay_deposit(self, session: BookingSession, event: BookingEvent) -> BookingSession:
        return self._advance(
            session,
            Stage.CONFIRMED,
            "Refundable security deposit authorized. Booking confirmed.",
            protection_choice=ProtectionChoice.DEPOSIT,
            refund_issued=False,
        )

    def _buy_insurance(self, session: BookingSession, event: BookingEvent) -> BookingSession:
        return self._advance(
            session,
            Stage.CONFIRMED,
            "Damage insurance purchased. Booking confirmed.",
            protection_choice=ProtectionChoice.INSURANCE,
            refund_issued=False,
        )

    def _decline_protection(self, session: BookingSession, event: BookingEvent) -> BookingSession:
        return self._advance(
            session,
            Stage.DETAILS,
            "Protection declined. Returned to browsing.",
            protection_choice=ProtectionChoice.NONE,
        )

    def _cancel_booking(self, session: BookingSession, event: BookingEvent) -> BookingSession:
        if session.stage == Stage.PICKUP:
            entry = "Booking cancelled after pickup arrangements. Refund review started."
        else:
            entry = "Booking cancelled before pickup. Full refund initiated."
        # The protection hold is released with the refund
        return self._advance(
            session,
            Stage.CANCELLED,
            entry,
            refund_issued=True,
            protection_choice=ProtectionChoice.NONE,
        )

    def _arrange_pickup(self, session: BookingSession, event: BookingEvent) -> BookingSession:
        return self._advance(session, Stage.PICKUP, "Pickup window confirmed with the owner.")

    def _arrange_dropoff(self, session: BookingSession, event: BookingEvent) -> BookingSession:
        return self._advance(
            session, Stage.DROPOFF, "Pickup completed. Dropoff planning started."
        )

    def _upload_evidence(self, session: BookingSession, event: BookingEvent) -> BookingSession:
        return self._advance(
            session,
            Stage.EVIDENCE,
            "Condition photos uploaded for the return checklist.",
        )

    def _return_deposit(self, session: BookingSession, event: BookingEvent) -> BookingSession:
        released = session.protection_choice == ProtectionChoice.DEPOSIT
        claim_status = session.claim_status
        if claim_status == ClaimStatus.PENDING:
            claim_status = ClaimStatus.APPROVED
        return self._advance(
            session,
            Stage.REVIEW,
            "Deposit released back to your card."
            if released
            else "Return completed. No deposit was held.",
            deposit_returned=session.deposit_returned or released,
            claim_status=claim_status,
        )

    def _open_claim(self, session: BookingSession, event: BookingEvent) -> BookingSession:
        return self._advance(
            session,
            Stage.RESOLUTION,
            "Claim opened with supporting evidence. Awaiting outcome.",
            claim_status=ClaimStatus.PENDING,
        )

    def _resolve_claim(self, session: BookingSession, event: ResolveClaim) -> BookingSession:
        approved = event.outcome == ClaimStatus.APPROVED.value
        return self._advance(
            session,
            Stage.REVIEW,
            "Claim approved. Insurance refund released."
            if approved
            else "Claim rejected. Support will follow up with next steps.",
            claim_status=ClaimStatus(event.outcome),
            deposit_returned=session.deposit_returned or approved,
        )

    def _write_review(self, session: BookingSession, event: BookingEvent) -> BookingSession:
        return self._advance(
            session,
            Stage.COMPLETED,
            "Review submitted. Thanks for the feedback!",
            review_submitted=True,
        )

    def _reset(self, session: BookingSession, event: Reset) -> BookingSession:
        return create_session(event.title)

    def _set_dates(self, session: BookingSession, event: SetDates) -> BookingSession:
        return session.model_copy(
            update={"start_date": event.start_date, "end_date": event.end_date}
        )

    def _set_times(self, session: BookingSession, event: SetTimes) -> BookingSession:
        return session.model_copy(
            update={
                "start_time": event.start_time or session.start_time,
                "end_time": event.end_time or session.end_time,
            }
        )

    def _require_auth(self, session: BookingSession, event: BookingEvent) -> BookingSession:
        return session.model_copy(
            update={
                "history": session.history
                + ("Sign in required to continue booking. Your dates will be kept.",)
            }
        )
