"""Quote model for a priced date range."""

from pydantic import BaseModel, ConfigDict, Field


class Quote(BaseModel):
    """Price breakdown for a candidate rental.

    Derived on every date or protection change, never stored. The deposit is
    disclosed separately and is not part of the total.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    days: int = Field(..., ge=1, description="Rental days (end - start)")
    subtotal: int = Field(..., ge=0, description="days * daily price")
    service_fee: int = Field(..., ge=0)
    taxes: int = Field(..., ge=0)
    insurance: int = Field(default=0, ge=0)
    total: int = Field(..., ge=0, description="Subtotal plus fees, taxes and insurance")
    deposit: int = Field(default=0, ge=0, description="Refundable hold, not in total")
