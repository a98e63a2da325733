"""Booking core services: availability, pricing, lifecycle and continuation."""

from .availability import (
    check_range,
    find_conflicts,
    is_date_available,
    is_date_selectable,
    is_range_valid,
    rental_days,
    suggest_alternative_ranges,
)
from .pricing import QuoteCalculator, compute_quote
from .lifecycle import BookingLifecycleMachine, create_session, reset_if_listing_changed
from .dynamodb import DynamoDBService, get_dynamodb_service
from .draft_store import DraftStore, DynamoDBDraftStore, InMemoryDraftStore
from .draft_continuation import DraftContinuation, sign_in_url
from .journey import available_actions, project_journey, protection_summary, visible_steps
from .booking_session import BookingSessionController, SubmissionGuard

__all__ = [
    # Availability
    "check_range",
    "find_conflicts",
    "is_date_available",
    "is_date_selectable",
    "is_range_valid",
    "rental_days",
    "suggest_alternative_ranges",
    # Pricing
    "QuoteCalculator",
    "compute_quote",
    # Lifecycle
    "BookingLifecycleMachine",
    "create_session",
    "reset_if_listing_changed",
    # Storage
    "DynamoDBService",
    "get_dynamodb_service",
    "DraftStore",
    "DynamoDBDraftStore",
    "InMemoryDraftStore",
    # Continuation
    "DraftContinuation",
    "sign_in_url",
    # Journey
    "available_actions",
    "project_journey",
    "protection_summary",
    "visible_steps",
    # Session owner
    "BookingSessionController",
    "SubmissionGuard",
]
