"""Unit tests for draft continuation across sign-in.

Tests cover:
- Signed-out START_BOOKING saves a draft, records REQUIRE_AUTH and redirects
- Signed-in START_BOOKING goes straight to the machine
- resume() restores dates exactly once
- Corrupted, expired or foreign drafts are discarded silently
"""

import datetime as dt
import json
import logging
from datetime import datetime, timedelta, timezone

import pytest

from rental_core.models import (
    AuthStatus,
    BookingSession,
    ErrorCode,
    Listing,
    ProtectionChoice,
    SetDates,
    Stage,
)
from rental_core.services.draft_continuation import DraftContinuation, sign_in_url
from rental_core.services.draft_store import InMemoryDraftStore
from rental_core.services.lifecycle import BookingLifecycleMachine

NOW = datetime(2024, 6, 20, 12, 0, tzinfo=timezone.utc)

SIGNED_OUT = AuthStatus(is_authenticated=False, is_loading=False)
SIGNED_IN = AuthStatus(is_authenticated=True, is_loading=False)
LOADING = AuthStatus(is_authenticated=False, is_loading=True)


@pytest.fixture
def store() -> InMemoryDraftStore:
    return InMemoryDraftStore()


@pytest.fixture
def continuation(
    store: InMemoryDraftStore, machine: BookingLifecycleMachine
) -> DraftContinuation:
    return DraftContinuation(store, machine=machine, ttl_seconds=600, clock=lambda: NOW)


@pytest.fixture
def dated_session(
    machine: BookingLifecycleMachine, fresh_session: BookingSession
) -> BookingSession:
    return machine.transition(
        fresh_session,
        SetDates(start_date=dt.date(2024, 7, 1), end_date=dt.date(2024, 7, 4)),
    )


class TestStartBooking:
    """Tests for the intercepted START_BOOKING."""

    def test_signed_out_saves_draft_and_redirects(
        self,
        continuation: DraftContinuation,
        store: InMemoryDraftStore,
        protected_listing: Listing,
        dated_session: BookingSession,
    ) -> None:
        outcome = continuation.start_booking(protected_listing, dated_session, SIGNED_OUT)

        assert outcome.requires_auth is True
        assert outcome.draft_saved is True
        assert outcome.error_code == ErrorCode.AUTH_REQUIRED
        assert outcome.redirect_to == "/signin?redirect=%2Flisting%2Fpro-climbing-rope-set"
        assert outcome.session.stage == Stage.DETAILS
        assert len(outcome.session.history) == len(dated_session.history) + 1

        payload = json.loads(store.get(protected_listing.id) or "{}")
        assert payload["listing_id"] == "pro-climbing-rope-set"
        assert payload["start_date"] == "2024-07-01"
        assert payload["end_date"] == "2024-07-04"
        assert payload["protection_choice"] == "none"
        assert payload["expires_at"] == int(NOW.timestamp()) + 600

    def test_signed_in_starts_booking(
        self,
        continuation: DraftContinuation,
        store: InMemoryDraftStore,
        protected_listing: Listing,
        dated_session: BookingSession,
    ) -> None:
        outcome = continuation.start_booking(protected_listing, dated_session, SIGNED_IN)

        assert outcome.requires_auth is False
        assert outcome.session.stage == Stage.PAYMENT
        assert len(store) == 0

    def test_signed_in_instant_listing_confirms(
        self,
        continuation: DraftContinuation,
        instant_listing: Listing,
        fresh_session: BookingSession,
    ) -> None:
        outcome = continuation.start_booking(instant_listing, fresh_session, SIGNED_IN)

        assert outcome.session.stage == Stage.CONFIRMED

    def test_loading_auth_defers(
        self,
        continuation: DraftContinuation,
        store: InMemoryDraftStore,
        protected_listing: Listing,
        dated_session: BookingSession,
    ) -> None:
        outcome = continuation.start_booking(protected_listing, dated_session, LOADING)

        assert outcome.session is dated_session
        assert outcome.requires_auth is False
        assert outcome.error_code is None
        assert len(store) == 0

    def test_signed_out_outside_details_is_ignored(
        self,
        continuation: DraftContinuation,
        store: InMemoryDraftStore,
        protected_listing: Listing,
        evidence_session: BookingSession,
    ) -> None:
        outcome = continuation.start_booking(protected_listing, evidence_session, SIGNED_OUT)

        assert outcome.session is evidence_session
        assert outcome.requires_auth is False
        assert len(store) == 0

    def test_sign_in_url_encodes_return_path(self) -> None:
        assert sign_in_url("sea kayak") == "/signin?redirect=%2Flisting%2Fsea+kayak"


class TestResume:
    """Tests for restoring a draft after sign-in."""

    def test_restores_dates_exactly_once(
        self,
        continuation: DraftContinuation,
        store: InMemoryDraftStore,
        protected_listing: Listing,
        dated_session: BookingSession,
        fresh_session: BookingSession,
    ) -> None:
        continuation.start_booking(protected_listing, dated_session, SIGNED_OUT)

        restored = continuation.resume(protected_listing.id, fresh_session, SIGNED_IN)

        assert restored.start_date == dt.date(2024, 7, 1)
        assert restored.end_date == dt.date(2024, 7, 4)
        assert restored.stage == Stage.DETAILS
        assert store.get(protected_listing.id) is None

        again = continuation.resume(protected_listing.id, restored, SIGNED_IN)
        assert again is restored

    def test_waits_for_auth(
        self,
        continuation: DraftContinuation,
        store: InMemoryDraftStore,
        protected_listing: Listing,
        dated_session: BookingSession,
        fresh_session: BookingSession,
    ) -> None:
        continuation.save(protected_listing.id, dated_session)

        assert continuation.resume(protected_listing.id, fresh_session, LOADING) is fresh_session
        assert continuation.resume(protected_listing.id, fresh_session, SIGNED_OUT) is fresh_session
        assert store.get(protected_listing.id) is not None

    def test_no_draft_is_noop(
        self, continuation: DraftContinuation, fresh_session: BookingSession
    ) -> None:
        assert continuation.resume("missing", fresh_session, SIGNED_IN) is fresh_session

    @pytest.mark.parametrize(
        "payload",
        [
            "not json",
            json.dumps({"listing_id": "pro-climbing-rope-set"}),
            json.dumps(
                {
                    "listing_id": "pro-climbing-rope-set",
                    "start_date": "2024-07-01",
                    "end_date": "tomorrow",
                    "protection_choice": "none",
                    "created_at": NOW.isoformat(),
                    "expires_at": int(NOW.timestamp()) + 600,
                }
            ),
            json.dumps(
                {
                    "listing_id": "pro-climbing-rope-set",
                    "start_date": None,
                    "end_date": "2024-07-04",
                    "protection_choice": "none",
                    "created_at": NOW.isoformat(),
                    "expires_at": int(NOW.timestamp()) + 600,
                }
            ),
        ],
    )
    def test_corrupted_draft_is_discarded(
        self,
        continuation: DraftContinuation,
        store: InMemoryDraftStore,
        fresh_session: BookingSession,
        payload: str,
    ) -> None:
        store.put("pro-climbing-rope-set", payload, 0)

        result = continuation.resume("pro-climbing-rope-set", fresh_session, SIGNED_IN)

        assert result is fresh_session
        assert store.get("pro-climbing-rope-set") is None

    def test_expired_draft_is_discarded(
        self,
        caplog: pytest.LogCaptureFixture,
        store: InMemoryDraftStore,
        machine: BookingLifecycleMachine,
        protected_listing: Listing,
        dated_session: BookingSession,
        fresh_session: BookingSession,
    ) -> None:
        writer = DraftContinuation(store, machine=machine, ttl_seconds=60, clock=lambda: NOW)
        writer.save(protected_listing.id, dated_session)
        later = DraftContinuation(
            store, machine=machine, clock=lambda: NOW + timedelta(minutes=5)
        )

        with caplog.at_level(logging.WARNING, logger="rental_core.services.draft_continuation"):
            result = later.resume(protected_listing.id, fresh_session, SIGNED_IN)

        assert result is fresh_session
        assert store.get(protected_listing.id) is None
        (record,) = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert record.error == "expired"
        assert record.error_code == "ERR_DRAFT_001"

    def test_draft_for_other_listing_is_discarded(
        self,
        continuation: DraftContinuation,
        store: InMemoryDraftStore,
        dated_session: BookingSession,
        fresh_session: BookingSession,
    ) -> None:
        draft = continuation.save("other-listing", dated_session)
        store.put("pro-climbing-rope-set", draft.model_dump_json(), draft.expires_at)

        result = continuation.resume("pro-climbing-rope-set", fresh_session, SIGNED_IN)

        assert result is fresh_session
        assert store.get("pro-climbing-rope-set") is None

    def test_saved_protection_choice_round_trips(
        self,
        continuation: DraftContinuation,
        store: InMemoryDraftStore,
        evidence_session: BookingSession,
    ) -> None:
        draft = continuation.save("pro-climbing-rope-set", evidence_session)

        assert draft.protection_choice == ProtectionChoice.DEPOSIT
        assert json.loads(store.get("pro-climbing-rope-set") or "{}")["protection_choice"] == (
            "deposit"
        )
