"""Listing models supplied by the listings subsystem.

The core only reads these. Money amounts are whole currency units.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ProtectionPolicy(BaseModel):
    """Deposit and insurance terms for a listing."""

    model_config = ConfigDict(strict=True, frozen=True)

    requires_protection: bool = Field(
        default=False,
        description="Renter must pay a deposit or buy insurance before confirmation",
    )
    deposit_amount: int | None = Field(
        default=None, ge=0, description="Refundable deposit amount"
    )
    deposit_description: str | None = None
    insurance_daily_price: int | None = Field(
        default=None, ge=0, description="Insurance price per rental day"
    )
    insurance_description: str | None = None


class Listing(BaseModel):
    """The subset of a gear listing the booking core consumes."""

    model_config = ConfigDict(strict=True, frozen=True)

    id: str = Field(..., min_length=1)
    title: str
    price_per_day: int = Field(..., ge=0)
    protection: ProtectionPolicy = Field(default_factory=ProtectionPolicy)
    pickup_notes: tuple[str, ...] = ()
    min_rental_days: int = Field(default=1, ge=1)
    max_rental_days: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def validate_rental_days(self) -> "Listing":
        """Ensure the maximum rental length is not below the minimum."""
        if self.max_rental_days is not None and self.max_rental_days < self.min_rental_days:
            raise ValueError("max_rental_days must be >= min_rental_days")
        return self


class AuthStatus(BaseModel):
    """Authentication status reported by the auth collaborator."""

    model_config = ConfigDict(strict=True, frozen=True)

    is_authenticated: bool = False
    is_loading: bool = False
