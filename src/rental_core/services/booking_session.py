"""Booking session controller: the seam between the view and the core.

The controller owns one listing view's session. It is the single entry
point for advancing the session (``submit``), and it receives the results
of asynchronous collaborators (availability fetch, auth check) as later,
independent calls rather than awaiting them inside a transition.
"""

import datetime as dt
import time
from typing import Any, Callable

from rental_core.models import (
    AuthStatus,
    AvailabilityWindow,
    BookingEvent,
    BookingSession,
    JourneyAction,
    JourneyStep,
    Listing,
    Quote,
    RangeRejection,
    StartBookingOutcome,
    parse_event,
)
from rental_core.services import availability
from rental_core.services.draft_continuation import DraftContinuation
from rental_core.services.draft_store import InMemoryDraftStore
from rental_core.services.journey import available_actions, project_journey
from rental_core.services.lifecycle import (
    BookingLifecycleMachine,
    create_session,
    reset_if_listing_changed,
)
from rental_core.services.pricing import QuoteCalculator
from rental_core.utils.logging import get_logger, set_correlation_id

logger = get_logger(__name__)


class SubmissionGuard:
    """Short-lived "processing" flag per user gesture.

    The machine's guards keep state correct under duplicate events, but not
    side effects such as a second navigation. The guard drops a repeat of
    the same gesture until it is released or the cooldown passes.
    """

    def __init__(
        self,
        cooldown_seconds: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.cooldown_seconds = cooldown_seconds
        self._clock = clock
        self._started: dict[str, float] = {}

    def try_acquire(self, gesture: str) -> bool:
        """Mark a gesture as processing.

        Returns:
            False if the same gesture is still processing
        """
        now = self._clock()
        started = self._started.get(gesture)
        if started is not None and now - started < self.cooldown_seconds:
            return False
        self._started[gesture] = now
        return True

    def release(self, gesture: str) -> None:
        self._started.pop(gesture, None)


class BookingSessionController:
    """Owns the booking session for a single listing view."""

    START_BOOKING_GESTURE = "start_booking"

    def __init__(
        self,
        listing: Listing,
        continuation: DraftContinuation | None = None,
        machine: BookingLifecycleMachine | None = None,
        guard: SubmissionGuard | None = None,
        calculator: QuoteCalculator | None = None,
    ) -> None:
        """Initialize controller.

        Args:
            listing: Listing the view opened with
            continuation: Draft continuation (defaults to an in-memory store)
            machine: Lifecycle machine
            guard: Duplicate-gesture guard
            calculator: Quote calculator
        """
        self.machine = machine or BookingLifecycleMachine()
        self.continuation = continuation or DraftContinuation(
            InMemoryDraftStore(), machine=self.machine
        )
        self.guard = guard or SubmissionGuard()
        self.calculator = calculator or QuoteCalculator()

        self.listing = listing
        self.session: BookingSession = create_session(listing.title)
        self.window: AvailabilityWindow | None = None
        self.selection_conflicts: list[dt.date] = []
        self.correlation_id = set_correlation_id()

    @property
    def listing_id(self) -> str:
        return self.listing.id

    def submit(self, event: BookingEvent | dict[str, Any]) -> BookingSession:
        """Apply one event and return the new session state.

        Args:
            event: Event model, or a UI payload such as {"type": "PAY_DEPOSIT"}

        Returns:
            The session after the event (unchanged if the guard failed)
        """
        if isinstance(event, dict):
            event = parse_event(event)
        self.session = self.machine.transition(self.session, event)
        return self.session

    def open_listing(self, listing: Listing) -> BookingSession:
        """Point the view at a (possibly different) listing.

        A different listing identity discards the session and the
        availability snapshot; the same listing keeps both.
        """
        previous_id = self.listing.id
        self.session = reset_if_listing_changed(
            self.session, listing.id, previous_id, listing.title
        )
        if listing.id != previous_id:
            self.window = None
            self.selection_conflicts = []
            self.correlation_id = set_correlation_id()
        self.listing = listing
        return self.session

    def request_start_booking(self, auth: AuthStatus) -> StartBookingOutcome:
        """Handle the "Book" gesture.

        The selected range must pass the resolver first; a rejected range
        leaves the session as is and reports the rejection's error code.
        Presses while auth is loading are no-ops and do not take the guard.
        Repeated presses within the guard's cooldown are dropped. Signed-out
        renters get a draft saved and a sign-in redirect.
        """
        rejection = self.range_rejection()
        if rejection is not None:
            logger.info(
                "Start booking blocked by selected dates",
                extra={
                    "listing_id": self.listing_id,
                    "error_code": rejection.error_code.value,
                },
            )
            return StartBookingOutcome(session=self.session, error_code=rejection.error_code)

        if auth.is_loading:
            return StartBookingOutcome(session=self.session)

        if not self.guard.try_acquire(self.START_BOOKING_GESTURE):
            logger.debug(
                "Duplicate start booking gesture dropped",
                extra={"listing_id": self.listing_id},
            )
            return StartBookingOutcome(session=self.session)

        previous = self.session
        outcome = self.continuation.start_booking(self.listing, previous, auth)
        if outcome.session is previous:
            # Unchanged session: free the gesture for the next press
            self.guard.release(self.START_BOOKING_GESTURE)
        self.session = outcome.session
        return outcome

    def on_auth_status(self, auth: AuthStatus) -> BookingSession:
        """Receive a resolved auth status and resume any saved draft."""
        self.session = self.continuation.resume(self.listing_id, self.session, auth)
        return self.session

    def on_availability_loaded(
        self,
        listing_id: str,
        window: AvailabilityWindow,
    ) -> list[dt.date]:
        """Receive an availability snapshot.

        Snapshots for another listing (the view moved on) are ignored. The
        current selection is checked against the new snapshot; conflicting
        days are reported but the selection is kept.

        Returns:
            Selected days that the snapshot marks unavailable
        """
        if listing_id != self.listing_id:
            logger.debug(
                "Stale availability snapshot ignored",
                extra={"listing_id": listing_id, "current_listing_id": self.listing_id},
            )
            return []

        self.window = window
        self.selection_conflicts = availability.find_conflicts(
            self.session.start_date, self.session.end_date, window
        )
        if self.selection_conflicts:
            logger.warning(
                "Selected dates conflict with loaded availability",
                extra={
                    "listing_id": listing_id,
                    "conflicts": [d.isoformat() for d in self.selection_conflicts],
                },
            )
        return self.selection_conflicts

    def _effective_window(self) -> AvailabilityWindow:
        # While the snapshot is pending only the listing's length limits apply
        if self.window is not None:
            return self.window
        return AvailabilityWindow(
            min_rental_days=self.listing.min_rental_days,
            max_rental_days=self.listing.max_rental_days,
        )

    def is_date_selectable(self, day: dt.date, today: dt.date | None = None) -> bool:
        return availability.is_date_selectable(day, self.window, today)

    def range_rejection(self) -> RangeRejection | None:
        """Why the current selection cannot be booked, if it cannot."""
        return availability.check_range(
            self.session.start_date, self.session.end_date, self._effective_window()
        )

    def can_start_booking(self) -> bool:
        """Whether the view should enable the "Book" action."""
        return self.range_rejection() is None and self.quote() is not None

    def quote(self) -> Quote | None:
        """Price the current selection and protection choice."""
        policy = self.listing.protection
        return self.calculator.compute_quote(
            self.session.start_date,
            self.session.end_date,
            self.listing.price_per_day,
            self.session.protection_choice,
            insurance_daily_price=policy.insurance_daily_price,
            deposit_amount=policy.deposit_amount,
        )

    def journey(self) -> list[JourneyStep]:
        return project_journey(self.session, self.listing)

    def actions(self) -> list[JourneyAction]:
        return available_actions(self.session, self.listing)
