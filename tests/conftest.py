"""Pytest configuration and fixtures for the gear rental booking core tests.

This module provides reusable fixtures for testing:
- DynamoDB mocking with moto for the draft store
- Sample listings and availability snapshots
- Helpers to drive a session to a given stage
"""

import datetime as dt
import os
from typing import Any, Callable, Generator

import boto3
import pytest
from moto import mock_aws

# === Environment Setup ===

# Set environment variables for testing before imports
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-1")
os.environ.setdefault("DYNAMODB_TABLE_PREFIX", "test-booking")

if not os.environ.get("AWS_PROFILE") and not os.environ.get("AWS_ACCESS_KEY_ID"):
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

from rental_core.models import (  # noqa: E402
    ArrangeDropoff,
    ArrangePickup,
    AvailabilityWindow,
    BookingEvent,
    BookingSession,
    Listing,
    PayDeposit,
    ProtectionPolicy,
    StartBooking,
    UploadEvidence,
)
from rental_core.services.lifecycle import BookingLifecycleMachine, create_session  # noqa: E402


# === DynamoDB Fixtures ===


@pytest.fixture(autouse=True)
def reset_dynamodb_singleton() -> Generator[None, None, None]:
    """Reset DynamoDB singleton before and after each test.

    Tests using mock_aws get a fresh service instance inside the mock
    context rather than reusing one from a previous test.
    """
    from rental_core.services.dynamodb import reset_dynamodb_service

    reset_dynamodb_service()
    yield
    reset_dynamodb_service()


@pytest.fixture
def aws_credentials() -> None:
    """Mocked AWS Credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "eu-west-1"


@pytest.fixture
def drafts_table(aws_credentials: None) -> Generator[Any, None, None]:
    """Create the mocked drafts table."""
    with mock_aws():
        client = boto3.client("dynamodb", region_name="eu-west-1")
        client.create_table(
            TableName="test-booking-drafts",
            KeySchema=[{"AttributeName": "draft_key", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "draft_key", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )
        yield client


# === Sample Data Fixtures ===


@pytest.fixture
def protected_listing() -> Listing:
    """Listing that requires a deposit or insurance."""
    return Listing(
        id="pro-climbing-rope-set",
        title="Professional Climbing Rope Set",
        price_per_day=45,
        protection=ProtectionPolicy(
            requires_protection=True,
            deposit_amount=150,
            deposit_description="Refundable hold released within 24h of dropoff after inspection.",
            insurance_daily_price=12,
            insurance_description="Covers accidental damage up to $2,000 with $0 deductible.",
        ),
        pickup_notes=("Pickup at the gym lobby. Government ID required.",),
        min_rental_days=1,
        max_rental_days=14,
    )


@pytest.fixture
def instant_listing() -> Listing:
    """Listing with optional insurance and no deposit."""
    return Listing(
        id="ultralight-backpacking-tent",
        title="Ultralight Backpacking Tent",
        price_per_day=40,
        protection=ProtectionPolicy(requires_protection=False, insurance_daily_price=10),
    )


@pytest.fixture
def sample_window() -> AvailabilityWindow:
    """Snapshot with one unavailable day, one booking and one block-out."""
    return AvailabilityWindow.from_record(
        {
            "unavailable_dates": ["2024-07-10"],
            "block_out_times": [
                {"start": "2024-07-20T08:00:00", "end": "2024-07-21T18:00:00"},
                {"start": "2024-07-25T08:00:00"},
            ],
            "existing_bookings": [
                {
                    "rental_start_date": "2024-07-14",
                    "rental_end_date": "2024-07-16",
                    "status": "confirmed",
                },
                {
                    "rental_start_date": "2024-07-01",
                    "rental_end_date": "2024-07-05",
                    "status": "cancelled_by_renter",
                },
            ],
            "min_rental_days": 2,
            "max_rental_days": 7,
        }
    )


@pytest.fixture
def today() -> dt.date:
    """Fixed reference day for selection tests."""
    return dt.date(2024, 7, 1)


# === Session Fixtures ===


@pytest.fixture
def machine() -> BookingLifecycleMachine:
    return BookingLifecycleMachine()


@pytest.fixture
def fresh_session() -> BookingSession:
    return create_session("Professional Climbing Rope Set")


def _drive(
    machine: BookingLifecycleMachine,
    session: BookingSession,
    *events: BookingEvent,
) -> BookingSession:
    for event in events:
        session = machine.transition(session, event)
    return session


@pytest.fixture
def drive(machine: BookingLifecycleMachine) -> Callable[..., BookingSession]:
    """Apply events in order and return the final session."""

    def _apply(session: BookingSession, *events: BookingEvent) -> BookingSession:
        return _drive(machine, session, *events)

    return _apply


@pytest.fixture
def evidence_session(
    machine: BookingLifecycleMachine,
    fresh_session: BookingSession,
) -> BookingSession:
    """Session at the evidence stage with a deposit held."""
    return _drive(
        machine,
        fresh_session,
        StartBooking(requires_protection=True),
        PayDeposit(),
        ArrangePickup(),
        ArrangeDropoff(),
        UploadEvidence(),
    )
