"""Quote calculator for rental pricing.

Fees and taxes are percentages of the subtotal, rounded half up to whole
currency units with integer arithmetic to avoid floating-point issues.
"""

import datetime as dt

from rental_core.models import ProtectionChoice, Quote
from rental_core.services.availability import DayLike, rental_days
from rental_core.utils.dates import parse_day


class QuoteCalculator:
    """Prices a date range for a listing."""

    SERVICE_FEE_PERCENT = 10
    TAX_PERCENT = 8

    def compute_quote(
        self,
        start_date: DayLike,
        end_date: DayLike,
        daily_price: int,
        protection_choice: ProtectionChoice,
        insurance_daily_price: int | None = None,
        deposit_amount: int | None = None,
    ) -> Quote | None:
        """Calculate the price breakdown for a rental.

        Args:
            start_date: First rental day
            end_date: Last rental day
            daily_price: Listing price per day
            protection_choice: Current protection choice
            insurance_daily_price: Insurance price per day, if offered
            deposit_amount: Refundable deposit, if any

        Returns:
            Quote, or None if a date is missing or the span is not positive
        """
        start = parse_day(start_date)
        end = parse_day(end_date)
        if start is None or end is None:
            return None

        days = rental_days(start, end)
        if days <= 0:
            return None

        subtotal = days * daily_price
        service_fee = self._percent_of(subtotal, self.SERVICE_FEE_PERCENT)
        taxes = self._percent_of(subtotal, self.TAX_PERCENT)

        insurance = 0
        if protection_choice == ProtectionChoice.INSURANCE and insurance_daily_price:
            insurance = days * insurance_daily_price

        return Quote(
            days=days,
            subtotal=subtotal,
            service_fee=service_fee,
            taxes=taxes,
            insurance=insurance,
            total=subtotal + service_fee + taxes + insurance,
            deposit=deposit_amount or 0,
        )

    @staticmethod
    def _percent_of(amount: int, percent: int) -> int:
        """Percentage of a non-negative amount, rounded half up."""
        return (amount * percent + 50) // 100


_calculator = QuoteCalculator()


def compute_quote(
    start_date: dt.date | dt.datetime | str | None,
    end_date: dt.date | dt.datetime | str | None,
    daily_price: int,
    protection_choice: ProtectionChoice = ProtectionChoice.NONE,
    insurance_daily_price: int | None = None,
    deposit_amount: int | None = None,
) -> Quote | None:
    """Calculate a quote with the default fee and tax rates."""
    return _calculator.compute_quote(
        start_date,
        end_date,
        daily_price,
        protection_choice,
        insurance_daily_price=insurance_daily_price,
        deposit_amount=deposit_amount,
    )
