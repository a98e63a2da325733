"""Unit tests for structured logging helpers."""

import logging

import pytest

from rental_core.utils.logging import (
    StructuredFormatter,
    clear_correlation_id,
    configure_logging,
    get_correlation_id,
    get_logger,
    log_draft_operation,
    log_transition,
    set_correlation_id,
)


@pytest.fixture(autouse=True)
def _clear_correlation() -> None:
    clear_correlation_id()


class TestCorrelationId:
    def test_set_generates_id(self) -> None:
        cid = set_correlation_id()

        assert cid
        assert get_correlation_id() == cid

    def test_set_keeps_given_id(self) -> None:
        assert set_correlation_id("session-1") == "session-1"

    def test_formatter_prefixes_id(self) -> None:
        set_correlation_id("session-1")
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)

        assert StructuredFormatter("%(message)s").format(record) == "[session-1] hello"


class TestLogHelpers:
    def test_ignored_transition_logs_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_logger("rental_core.test")

        with caplog.at_level(logging.DEBUG, logger="rental_core.test"):
            log_transition(logger, "PAY_DEPOSIT", from_stage="details", accepted=False)
            log_transition(logger, "START_BOOKING", from_stage="details", to_stage="payment")

        levels = [r.levelno for r in caplog.records]
        assert levels == [logging.DEBUG, logging.INFO]
        assert "details -> payment" in caplog.records[1].getMessage()
        assert caplog.records[1].correlation_id == "no-correlation-id"

    def test_discarded_draft_logs_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_logger("rental_core.test")

        with caplog.at_level(logging.INFO, logger="rental_core.test"):
            log_draft_operation(logger, "restore", "tent", result="discarded", error="expired")

        (record,) = caplog.records
        assert record.levelno == logging.WARNING
        assert record.getMessage() == (
            "Draft operation: restore (tent) | result=discarded | error=expired"
        )


class TestConfigureLogging:
    def test_installs_handler_once(self) -> None:
        package_logger = logging.getLogger("rental_core")
        before = list(package_logger.handlers)
        try:
            configure_logging(logging.DEBUG)
            configure_logging(logging.DEBUG)

            added = [h for h in package_logger.handlers if h not in before]
            assert len(added) == 1
            assert isinstance(added[0].formatter, StructuredFormatter)
            assert package_logger.level == logging.DEBUG
        finally:
            package_logger.handlers = before
            package_logger.setLevel(logging.NOTSET)
