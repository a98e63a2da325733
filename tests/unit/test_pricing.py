"""Unit tests for the quote calculator.

Tests verify the price breakdown:
- subtotal = days * daily price (days = end - start, exclusive)
- 10% service fee and 8% taxes, rounded half up
- insurance only when chosen; deposit disclosed but never in the total
"""

import datetime as dt

import pytest

from rental_core.models import ProtectionChoice
from rental_core.services.pricing import QuoteCalculator, compute_quote


class TestComputeQuote:
    """Tests for compute_quote arithmetic."""

    def test_insurance_quote(self) -> None:
        quote = compute_quote(
            dt.date(2024, 7, 1),
            dt.date(2024, 7, 4),
            daily_price=40,
            protection_choice=ProtectionChoice.INSURANCE,
            insurance_daily_price=10,
        )

        assert quote is not None
        assert quote.days == 3
        assert quote.subtotal == 120
        assert quote.service_fee == 12
        assert quote.taxes == 10
        assert quote.insurance == 30
        assert quote.total == 172
        assert quote.deposit == 0

    def test_insurance_price_ignored_unless_chosen(self) -> None:
        quote = compute_quote(
            "2024-07-01",
            "2024-07-04",
            daily_price=40,
            protection_choice=ProtectionChoice.DEPOSIT,
            insurance_daily_price=10,
            deposit_amount=150,
        )

        assert quote is not None
        assert quote.insurance == 0
        assert quote.total == 142

    def test_deposit_is_not_added_to_total(self) -> None:
        quote = compute_quote(
            "2024-07-01",
            "2024-07-03",
            daily_price=45,
            protection_choice=ProtectionChoice.DEPOSIT,
            deposit_amount=150,
        )

        assert quote is not None
        assert quote.deposit == 150
        # 90 + 9 + 7 (7.2 rounds down)
        assert quote.total == 106

    def test_fees_round_half_up(self) -> None:
        # subtotal 25: fee 2.5 -> 3, taxes 2.0 -> 2
        quote = compute_quote("2024-07-01", "2024-07-02", daily_price=25)

        assert quote is not None
        assert quote.service_fee == 3
        assert quote.taxes == 2

    @pytest.mark.parametrize(
        ("start", "end"),
        [
            (None, "2024-07-03"),
            ("2024-07-01", None),
            ("2024-07-03", "2024-07-01"),
            ("2024-07-01", "2024-07-01"),
            ("garbage", "2024-07-03"),
        ],
    )
    def test_returns_none_without_positive_span(
        self, start: str | None, end: str | None
    ) -> None:
        assert compute_quote(start, end, daily_price=40) is None

    def test_span_is_exclusive_of_end(self) -> None:
        quote = compute_quote("2024-07-01", "2024-07-02", daily_price=40)

        assert quote is not None
        assert quote.days == 1
        assert quote.subtotal == 40


class TestQuoteCalculatorRates:
    """Rates are class constants that subclasses can override."""

    def test_custom_rates(self) -> None:
        class NoFeeCalculator(QuoteCalculator):
            SERVICE_FEE_PERCENT = 0
            TAX_PERCENT = 0

        quote = NoFeeCalculator().compute_quote(
            "2024-07-01", "2024-07-03", 50, ProtectionChoice.NONE
        )

        assert quote is not None
        assert quote.total == 100
