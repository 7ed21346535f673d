"""Stripe integration: webhook signature verification and line item lookup.

Uses the v8+ StripeClient pattern. Credentials come from ``Settings``; the
service holds no mutable state apart from its lazily created client.
"""

import json
import logging
from typing import Any

import stripe
from stripe import StripeClient

from checkout_notifier.config import Settings
from checkout_notifier.models.stripe_webhook import VerifiedEvent, to_verified_event

logger = logging.getLogger(__name__)

LINE_ITEM_PLACEHOLDER = "Item"


class StripeServiceError(Exception):
    """Raised when a Stripe operation fails."""

    def __init__(self, message: str, stripe_error_code: str | None = None) -> None:
        """Initialize with message and optional Stripe error code.

        Args:
            message: Human-readable error message.
            stripe_error_code: Stripe-specific error code if available.
        """
        super().__init__(message)
        self.stripe_error_code = stripe_error_code


def _attr(obj: Any, name: str) -> Any:
    """Read an attribute from a StripeObject or a plain dict, None if missing."""
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


class StripeService:
    """Service for the Stripe calls made while handling a webhook.

    Handles:
    - Webhook signature validation (raw body + Stripe-Signature header)
    - Retrieving the line items of a checkout session

    Usage:
        stripe_svc = StripeService(settings)
        event = stripe_svc.verify_webhook_signature(raw_body, signature)
    """

    def __init__(self, settings: Settings, client: StripeClient | None = None) -> None:
        """Initialize Stripe service.

        Args:
            settings: Application settings with the Stripe secrets.
            client: Optional pre-built StripeClient (mainly for tests).
        """
        self._webhook_secret = settings.stripe_webhook_secret
        self._secret_key = settings.stripe_secret_key
        self._tolerance = settings.webhook_tolerance_seconds
        self._client = client

    def _get_client(self) -> StripeClient:
        """Get or create the Stripe client (lazy initialization).

        Raises:
            StripeServiceError: If no API key is configured.
        """
        if self._client is None:
            if not self._secret_key:
                raise StripeServiceError("STRIPE_SECRET_KEY is not configured")
            self._client = StripeClient(self._secret_key)
            logger.info("Stripe client initialized")
        return self._client

    def verify_webhook_signature(
        self, payload: bytes, signature: str | None
    ) -> VerifiedEvent:
        """Verify a webhook signature and parse the event.

        Args:
            payload: Raw request body bytes, exactly as received.
            signature: Stripe-Signature header value.

        Returns:
            The verified event.

        Raises:
            StripeServiceError: If the header or secret is missing, the signature
                does not match, the timestamp is outside the tolerance window,
                or the payload is not valid JSON.
        """
        if not signature:
            raise StripeServiceError("Missing Stripe-Signature header")
        if not self._webhook_secret:
            raise StripeServiceError("Webhook signing secret is not configured")

        try:
            stripe.Webhook.construct_event(
                payload, signature, self._webhook_secret, tolerance=self._tolerance
            )
        except stripe.SignatureVerificationError as e:
            logger.warning("Invalid webhook signature: %s", e.user_message or str(e))
            raise StripeServiceError(e.user_message or str(e)) from e
        except ValueError as e:
            logger.warning("Webhook payload is not valid JSON: %s", e)
            raise StripeServiceError(f"Invalid payload: {e}") from e

        # construct_event has parsed these exact bytes already; re-read them as
        # plain dicts so nothing downstream depends on StripeObject behaviour.
        event = to_verified_event(json.loads(payload))
        logger.info("Webhook signature verified for event: %s", event.event_id)
        return event

    def fetch_line_item_descriptions(self, session_id: str) -> list[str]:
        """Retrieve a checkout session with its line items expanded.

        Blocking call; run it in a threadpool from async code.

        Args:
            session_id: Checkout Session ID (cs_xxx).

        Returns:
            One description per line item: the item description, else the
            product name, else a generic placeholder.

        Raises:
            StripeServiceError: If the client is not configured or the call fails.
        """
        client = self._get_client()

        try:
            session = client.checkout.sessions.retrieve(
                session_id,
                params={"expand": ["line_items", "line_items.data.price.product"]},
            )
        except stripe.StripeError as e:
            error_code = getattr(e, "code", None)
            logger.error(
                "Stripe session retrieval failed: %s (code: %s)", str(e), error_code
            )
            raise StripeServiceError(
                f"Failed to retrieve checkout session {session_id}: {e}",
                stripe_error_code=error_code,
            ) from e

        items = _attr(_attr(session, "line_items"), "data") or []
        return [
            _attr(item, "description")
            or _attr(_attr(_attr(item, "price"), "product"), "name")
            or LINE_ITEM_PLACEHOLDER
            for item in items
        ]
