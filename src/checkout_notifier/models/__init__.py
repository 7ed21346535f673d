"""Pydantic models for the checkout webhook receiver."""

from .errors import ERROR_MESSAGES, ErrorCode, WebhookError
from .notification import DeliveryResult, SinkResult, SinkStatus
from .order import DEFAULT_CUSTOMER_NAME, UNKNOWN_PRODUCT, OrderRecord
from .stripe_webhook import (
    CHECKOUT_SESSION_COMPLETED,
    CheckoutSessionCompleted,
    UnhandledEvent,
    VerifiedEvent,
    to_verified_event,
)

__all__ = [
    # Errors
    "ERROR_MESSAGES",
    "ErrorCode",
    "WebhookError",
    # Notifications
    "DeliveryResult",
    "SinkResult",
    "SinkStatus",
    # Orders
    "DEFAULT_CUSTOMER_NAME",
    "UNKNOWN_PRODUCT",
    "OrderRecord",
    # Stripe events
    "CHECKOUT_SESSION_COMPLETED",
    "CheckoutSessionCompleted",
    "UnhandledEvent",
    "VerifiedEvent",
    "to_verified_event",
]
