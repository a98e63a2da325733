"""Draft continuation across the sign-in redirect.

Flow:
1. A signed-out renter presses "Book": the selection is saved as a draft
   keyed by listing, REQUIRE_AUTH is recorded and the view is sent to sign in.
2. Back on the same listing, once auth resolves, ``resume`` pops the draft
   and replays SET_DATES.

A draft is consumed exactly once: it is removed before it is validated, so
a corrupted or expired draft is dropped and never retried.
"""

import os
from datetime import datetime, timezone
from typing import Callable
from urllib.parse import urlencode

from pydantic import ValidationError

from rental_core.models import (
    AuthStatus,
    BookingDraft,
    BookingSession,
    ErrorCode,
    Listing,
    RequireAuth,
    SetDates,
    Stage,
    StartBooking,
    StartBookingOutcome,
)
from rental_core.services.draft_store import DraftStore
from rental_core.services.lifecycle import BookingLifecycleMachine
from rental_core.utils.dates import parse_day
from rental_core.utils.logging import get_logger, log_draft_operation

logger = get_logger(__name__)

DRAFT_TTL_SECONDS = int(os.getenv("BOOKING_DRAFT_TTL_SECONDS", "600"))
SIGN_IN_PATH = os.getenv("SIGN_IN_PATH", "/signin")


def listing_path(listing_id: str) -> str:
    """Path of the listing view the renter returns to."""
    return f"/listing/{listing_id}"


def sign_in_url(listing_id: str) -> str:
    """Sign-in URL that brings the renter back to the listing."""
    return f"{SIGN_IN_PATH}?{urlencode({'redirect': listing_path(listing_id)})}"


class DraftContinuation:
    """Saves and restores booking intent around authentication."""

    def __init__(
        self,
        store: DraftStore,
        machine: BookingLifecycleMachine | None = None,
        ttl_seconds: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize continuation.

        Args:
            store: Draft store scoped to the renter's browser session
            machine: Lifecycle machine used to replay events
            ttl_seconds: Draft lifetime (defaults to BOOKING_DRAFT_TTL_SECONDS)
            clock: Returns the current UTC time (injectable for tests)
        """
        self.store = store
        self.machine = machine or BookingLifecycleMachine()
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else DRAFT_TTL_SECONDS
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def save(self, listing_id: str, session: BookingSession) -> BookingDraft:
        """Serialize the session's selection for later restoration."""
        now = self._clock()
        draft = BookingDraft(
            listing_id=listing_id,
            start_date=session.start_date.isoformat() if session.start_date else None,
            end_date=session.end_date.isoformat() if session.end_date else None,
            protection_choice=session.protection_choice,
            created_at=now,
            expires_at=int(now.timestamp()) + self.ttl_seconds,
        )
        self.store.put(listing_id, draft.model_dump_json(), draft.expires_at)
        log_draft_operation(logger, "save", listing_id, result="saved")
        return draft

    def start_booking(
        self,
        listing: Listing,
        session: BookingSession,
        auth: AuthStatus,
    ) -> StartBookingOutcome:
        """Submit START_BOOKING, or defer it behind sign-in.

        Args:
            listing: Listing being booked
            session: Current session
            auth: Current authentication status

        Returns:
            StartBookingOutcome with the new session and, when the renter
            must sign in first, the redirect URL
        """
        if auth.is_loading:
            # Auth not resolved yet; the view keeps the button disabled
            return StartBookingOutcome(session=session)

        if auth.is_authenticated:
            event = StartBooking(requires_protection=listing.protection.requires_protection)
            return StartBookingOutcome(session=self.machine.transition(session, event))

        if session.stage != Stage.DETAILS:
            return StartBookingOutcome(session=session)

        self.save(listing.id, session)
        updated = self.machine.transition(session, RequireAuth())
        return StartBookingOutcome(
            session=updated,
            redirect_to=sign_in_url(listing.id),
            draft_saved=True,
            error_code=ErrorCode.AUTH_REQUIRED,
        )

    def resume(
        self,
        listing_id: str,
        session: BookingSession,
        auth: AuthStatus,
    ) -> BookingSession:
        """Restore a saved draft once the renter is signed in.

        Args:
            listing_id: Listing the view is showing
            session: Current session
            auth: Current authentication status

        Returns:
            Session with the draft dates applied, or the same session when
            there is nothing (valid) to restore
        """
        if auth.is_loading or not auth.is_authenticated:
            return session

        raw = self.store.pop(listing_id)
        if raw is None:
            return session

        try:
            draft = BookingDraft.model_validate_json(raw)
        except ValidationError as e:
            return self._discard(listing_id, session, str(e))

        if draft.listing_id != listing_id:
            return self._discard(listing_id, session, "listing mismatch")

        if draft.expires_at < int(self._clock().timestamp()):
            return self._discard(listing_id, session, "expired")

        start_date = parse_day(draft.start_date)
        end_date = parse_day(draft.end_date)
        if start_date is None or end_date is None:
            return self._discard(listing_id, session, "unparsable dates")

        restored = self.machine.transition(
            session, SetDates(start_date=start_date, end_date=end_date)
        )
        log_draft_operation(logger, "restore", listing_id, result="restored")
        return restored

    @staticmethod
    def _discard(listing_id: str, session: BookingSession, reason: str) -> BookingSession:
        log_draft_operation(
            logger,
            "restore",
            listing_id,
            result="discarded",
            error=reason,
            error_code=ErrorCode.DRAFT_INVALID.value,
        )
        return session
