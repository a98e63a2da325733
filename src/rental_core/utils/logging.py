"""Logging for the booking core, tagged with a per-session correlation id.

Every listing view gets its own id, so all transitions, availability
updates and draft operations of one booking session can be grepped
together.

Usage:
    from rental_core.utils.logging import get_logger, set_correlation_id

    set_correlation_id()              # when a listing view opens a session
    logger = get_logger(__name__)
    logger.info("Quote computed", extra={"listing_id": "rope-set"})
"""

import logging
import uuid
from contextvars import ContextVar
from typing import Any

NO_CORRELATION_ID = "no-correlation-id"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Bind a correlation id to the current context.

    Args:
        correlation_id: Id to reuse; a new UUID4 is generated when omitted

    Returns:
        The id now in effect
    """
    cid = correlation_id or str(uuid.uuid4())
    _correlation_id.set(cid)
    return cid


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def clear_correlation_id() -> None:
    _correlation_id.set(None)


class CorrelationIdFilter(logging.Filter):
    """Stamps ``correlation_id`` on every record passing through."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or NO_CORRELATION_ID
        return True


class StructuredFormatter(logging.Formatter):
    """Prefixes each line with ``[correlation_id]``."""

    def format(self, record: logging.LogRecord) -> str:
        cid = getattr(record, "correlation_id", None) or get_correlation_id()
        record.correlation_id = cid or NO_CORRELATION_ID
        return f"[{record.correlation_id}] {super().format(record)}"


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)`` with the correlation filter attached once."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, CorrelationIdFilter) for f in logger.filters):
        logger.addFilter(CorrelationIdFilter())
    return logger


def configure_logging(level: int | str = logging.INFO) -> None:
    """Install a stream handler with StructuredFormatter on the package logger (once)."""
    package_logger = logging.getLogger("rental_core")
    package_logger.setLevel(level)
    if not any(
        isinstance(h.formatter, StructuredFormatter) for h in package_logger.handlers
    ):
        handler = logging.StreamHandler()
        handler.setFormatter(StructuredFormatter(DEFAULT_FORMAT))
        package_logger.addHandler(handler)


def log_transition(
    logger: logging.Logger,
    event_type: str,
    *,
    from_stage: str,
    to_stage: str | None = None,
    accepted: bool = True,
    **extra: Any,
) -> None:
    """Log a lifecycle event with structured context.

    Accepted transitions log at INFO, ignored events (guard failures) at DEBUG.

    Args:
        logger: Logger instance
        event_type: Event name (e.g., "PAY_DEPOSIT")
        from_stage: Stage the event was applied to
        to_stage: Resulting stage (for accepted events)
        accepted: Whether the guard admitted the event
        **extra: Additional context fields
    """
    context: dict[str, Any] = {
        "event_type": event_type,
        "from_stage": from_stage,
        "accepted": accepted,
    }
    if to_stage:
        context["to_stage"] = to_stage
    context.update(extra)

    if not accepted:
        logger.debug(
            f"Booking event ignored: {event_type} | stage={from_stage}",
            extra=context,
        )
        return

    msg_parts = [f"Booking event: {event_type}", f"{from_stage} -> {to_stage or from_stage}"]
    for key, value in extra.items():
        msg_parts.append(f"{key}={value}")

    logger.info(" | ".join(msg_parts), extra=context)


def log_draft_operation(
    logger: logging.Logger,
    operation: str,
    listing_id: str,
    *,
    result: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log a draft continuation operation with structured context.

    Args:
        logger: Logger instance
        operation: Operation name (e.g., "save", "restore")
        listing_id: Listing the draft is keyed by
        result: Outcome (saved, restored, missing, discarded)
        error: Error message if the draft was unusable
        **extra: Additional context fields
    """
    context: dict[str, Any] = {"operation": operation, "listing_id": listing_id}
    if result:
        context["result"] = result
    if error:
        context["error"] = error
    context.update(extra)

    msg_parts = [f"Draft operation: {operation} ({listing_id})"]
    if result:
        msg_parts.append(f"result={result}")
    if error:
        msg_parts.append(f"error={error}")

    message = " | ".join(msg_parts)

    if result == "discarded":
        logger.warning(message, extra=context)
    else:
        logger.info(message, extra=context)
