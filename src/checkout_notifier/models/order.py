"""Normalized order record built from a completed checkout session."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CUSTOMER_NAME = "customer"
UNKNOWN_PRODUCT = "Unknown product"


class OrderRecord(BaseModel):
    """Order details extracted from a ``checkout.session.completed`` event.

    Created once per verified event and discarded after the notifications
    have been dispatched.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    email: str | None = Field(
        default=None,
        description="Customer email from customer_details, if Stripe collected one",
        examples=["a@b.cz"],
    )
    name: str = Field(
        default=DEFAULT_CUSTOMER_NAME,
        description="Customer display name",
        examples=["Alena"],
    )
    amount_minor_units: int = Field(
        ...,
        ge=0,
        description="Total charged, in the currency's minor units (cents, haléře)",
        examples=[1990],
    )
    currency_code: str = Field(
        ...,
        pattern=r"^[A-Za-z]{3}$",
        description="ISO 4217 currency code as sent by Stripe",
        examples=["czk"],
    )
    product_description: str | None = Field(
        default=None,
        description="Comma separated line item descriptions",
    )
    session_id: str | None = Field(
        default=None,
        description="Checkout Session ID, used for log correlation only",
    )

    @property
    def major_units(self) -> Decimal:
        """Amount in major units (1990 -> Decimal('19.90'))."""
        return (Decimal(self.amount_minor_units) / 100).quantize(Decimal("0.01"))

    @property
    def formatted_amount(self) -> str:
        """Amount for display, e.g. ``"19.90 CZK"``."""
        return f"{self.major_units} {self.currency_code.upper()}"
