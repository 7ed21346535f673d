"""Notification sinks triggered by a completed order.

Every sink returns a SinkResult instead of raising. A sink whose
configuration is missing reports ``skipped_not_configured``.
"""

from datetime import UTC, datetime
from typing import Callable, Protocol

import httpx

from checkout_notifier.config import Settings
from checkout_notifier.models.notification import SinkResult
from checkout_notifier.models.order import OrderRecord
from checkout_notifier.services.automation_service import AutomationClient, build_order_payload
from checkout_notifier.services.email_service import ResendEmailClient
from checkout_notifier.services.notifications import templates


class NotificationSink(Protocol):
    """A single downstream action for a completed order."""

    name: str

    async def send(self, order: OrderRecord) -> SinkResult: ...


class CustomerEmailSink:
    """Confirmation email to the customer."""

    name = "customer_email"

    def __init__(self, email_client: ResendEmailClient | None, sender: str) -> None:
        self._client = email_client
        self._sender = sender

    async def send(self, order: OrderRecord) -> SinkResult:
        if self._client is None:
            return SinkResult.skipped(self.name, "RESEND_API_KEY is not set")
        if not order.email:
            return SinkResult.skipped(self.name, "order has no customer email")

        subject, body = templates.customer_email(order)
        result = await self._client.send(
            sender=self._sender, to=order.email, subject=subject, text=body
        )
        if not result.ok:
            return SinkResult.failed(self.name, result.failure_reason)
        return SinkResult.sent(self.name)


class MerchantEmailSink:
    """New-order email to the shop owner."""

    name = "merchant_email"

    def __init__(
        self,
        email_client: ResendEmailClient | None,
        sender: str,
        recipient: str | None,
    ) -> None:
        self._client = email_client
        self._sender = sender
        self._recipient = recipient

    async def send(self, order: OrderRecord) -> SinkResult:
        if self._client is None:
            return SinkResult.skipped(self.name, "RESEND_API_KEY is not set")
        if not self._recipient:
            return SinkResult.skipped(self.name, "EMAIL_OWNER is not set")

        subject, body = templates.merchant_email(order)
        result = await self._client.send(
            sender=self._sender, to=self._recipient, subject=subject, text=body
        )
        if not result.ok:
            return SinkResult.failed(self.name, result.failure_reason)
        return SinkResult.sent(self.name)


class AutomationPushSink:
    """Order row pushed to the automation webhook."""

    name = "automation_push"

    def __init__(
        self,
        client: AutomationClient | None,
        timezone_name: str,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._client = client
        self._timezone_name = timezone_name
        self._clock = clock or (lambda: datetime.now(UTC))

    async def send(self, order: OrderRecord) -> SinkResult:
        if self._client is None:
            return SinkResult.skipped(self.name, "MAKE_WEBHOOK_URL is not set")

        payload = build_order_payload(order, self._clock(), self._timezone_name)
        result = await self._client.push(payload)
        if not result.ok:
            return SinkResult.failed(self.name, result.failure_reason)
        return SinkResult.sent(self.name)


def build_sinks(settings: Settings, http: httpx.AsyncClient) -> list[NotificationSink]:
    """Build the sinks in dispatch order from the current settings.

    Args:
        settings: Application settings
        http: Request-scoped HTTP client shared by all sinks

    Returns:
        [customer email, merchant email, automation push]
    """
    email_client = (
        ResendEmailClient(http, settings.resend_api_key) if settings.resend_api_key else None
    )
    automation_client = (
        AutomationClient(http, settings.make_webhook_url) if settings.make_webhook_url else None
    )

    return [
        CustomerEmailSink(email_client, settings.email_from),
        MerchantEmailSink(email_client, settings.email_from, settings.email_owner),
        AutomationPushSink(automation_client, settings.order_timezone),
    ]
