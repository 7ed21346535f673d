"""Push completed orders to an automation webhook (Make scenario, Sheets, ...)."""

import logging
from datetime import UTC, datetime
from typing import Any
from zoneinfo import ZoneInfo

import httpx

from checkout_notifier.models.notification import DeliveryResult
from checkout_notifier.models.order import OrderRecord

logger = logging.getLogger(__name__)


def build_order_payload(
    order: OrderRecord,
    now_utc: datetime,
    timezone_name: str,
) -> dict[str, Any]:
    """Build the JSON body pushed to the automation hook.

    Args:
        order: The order to push
        now_utc: Timestamp of the push (aware, UTC)
        timezone_name: IANA zone used for the human readable createdAt

    Returns:
        Payload dict with amount in major units and both timestamps.
    """
    local = now_utc.astimezone(ZoneInfo(timezone_name))

    return {
        "email": order.email,
        "name": order.name,
        "amount": float(order.major_units),
        "currency": order.currency_code.upper(),
        "product": order.product_description,
        "createdAt": local.strftime("%d.%m.%Y %H:%M:%S"),
        "createdAtUtc": now_utc.astimezone(UTC)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z"),
    }


class AutomationClient:
    """POSTs JSON payloads to a single configured URL."""

    def __init__(self, http: httpx.AsyncClient, url: str) -> None:
        self._http = http
        self._url = url

    async def push(self, payload: dict[str, Any]) -> DeliveryResult:
        """Send the payload; transport errors are reported, not raised."""
        try:
            response = await self._http.post(self._url, json=payload)
        except httpx.HTTPError as e:
            logger.error("Automation webhook call failed: %s", e)
            return DeliveryResult(ok=False, detail=f"{type(e).__name__}: {e}")

        if response.is_success:
            return DeliveryResult(ok=True, status_code=response.status_code)

        return DeliveryResult(
            ok=False,
            status_code=response.status_code,
            detail=response.text,
        )
