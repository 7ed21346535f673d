"""Build an OrderRecord from a completed checkout session.

Missing optional data is explicit policy, not an error:
- no customer email: recorded as None, the customer email sink skips
- no customer name: "customer"
- line item lookup fails or returns nothing: "Unknown product"
"""

from typing import Any

from starlette.concurrency import run_in_threadpool

from checkout_notifier.models.order import DEFAULT_CUSTOMER_NAME, UNKNOWN_PRODUCT, OrderRecord
from checkout_notifier.services.stripe_service import StripeService, StripeServiceError
from checkout_notifier.utils.logging import get_logger

logger = get_logger(__name__)


def build_order_record(
    session: dict[str, Any], product_description: str | None = None
) -> OrderRecord:
    """Map a checkout session payload to an OrderRecord.

    Pure function of its arguments: the same session always yields an
    identical record.

    Args:
        session: Checkout Session object (``data.object`` of the event)
        product_description: Description from the line item lookup, if any

    Returns:
        Normalized OrderRecord
    """
    customer = session.get("customer_details") or {}

    return OrderRecord(
        email=customer.get("email") or None,
        name=customer.get("name") or DEFAULT_CUSTOMER_NAME,
        amount_minor_units=int(session.get("amount_total") or 0),
        currency_code=session.get("currency") or "",
        product_description=product_description,
        session_id=session.get("id"),
    )


class OrderExtractor:
    """Extracts orders and enriches them with line item descriptions."""

    def __init__(self, stripe_service: StripeService) -> None:
        self._stripe = stripe_service

    async def describe_products(self, session_id: str | None) -> str:
        """Return the comma separated line item descriptions of a session.

        Never raises: any lookup failure is logged and the placeholder is
        returned instead.
        """
        if not session_id:
            return UNKNOWN_PRODUCT

        try:
            descriptions = await run_in_threadpool(
                self._stripe.fetch_line_item_descriptions, session_id
            )
        except StripeServiceError as e:
            logger.error("Line item lookup failed for session %s: %s", session_id, e)
            return UNKNOWN_PRODUCT
        except Exception:
            logger.exception("Unexpected error during line item lookup for session %s", session_id)
            return UNKNOWN_PRODUCT

        if not descriptions:
            return UNKNOWN_PRODUCT
        return ", ".join(descriptions)

    async def extract(self, session: dict[str, Any]) -> OrderRecord:
        """Build the OrderRecord for a completed checkout session."""
        product_description = await self.describe_products(session.get("id"))
        order = build_order_record(session, product_description)

        logger.info(
            "Successful payment: name=%s email=%s amount=%s products=%s",
            order.name,
            order.email,
            order.formatted_amount,
            order.product_description,
        )
        return order
