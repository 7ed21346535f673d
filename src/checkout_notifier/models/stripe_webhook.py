"""Verified Stripe webhook events.

Instances are only produced by ``StripeService.verify_webhook_signature``,
after the signature over the raw body has been checked.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"


class CheckoutSessionCompleted(BaseModel):
    """A verified ``checkout.session.completed`` event."""

    model_config = ConfigDict(frozen=True)

    event_id: str = Field(
        ...,
        description="Stripe event ID (evt_xxx)",
        examples=["evt_1ABC123DEF456"],
    )
    event_type: Literal["checkout.session.completed"] = CHECKOUT_SESSION_COMPLETED
    session: dict[str, Any] = Field(
        default_factory=dict,
        description="Checkout Session object from data.object",
    )

    @property
    def session_id(self) -> str | None:
        return self.session.get("id")


class UnhandledEvent(BaseModel):
    """A verified event of a type this receiver acknowledges but ignores."""

    model_config = ConfigDict(frozen=True)

    event_id: str = Field(..., description="Stripe event ID (evt_xxx)")
    event_type: str = Field(
        ...,
        description="Stripe event type",
        examples=["payment_intent.created", "charge.refunded"],
    )


VerifiedEvent = CheckoutSessionCompleted | UnhandledEvent


def to_verified_event(event: dict[str, Any]) -> VerifiedEvent:
    """Map a signature-checked Stripe event dict to a VerifiedEvent.

    Args:
        event: Event dictionary returned by ``stripe.Webhook.construct_event``

    Returns:
        CheckoutSessionCompleted for completed checkouts, UnhandledEvent otherwise.
    """
    event_id = event.get("id") or ""
    event_type = event.get("type") or ""

    if event_type == CHECKOUT_SESSION_COMPLETED:
        session = (event.get("data") or {}).get("object") or {}
        return CheckoutSessionCompleted(event_id=event_id, session=dict(session))

    return UnhandledEvent(event_id=event_id, event_type=event_type)
