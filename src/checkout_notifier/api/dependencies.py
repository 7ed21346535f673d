"""FastAPI dependency providers for the webhook route.

Settings are built once per process (``get_settings`` is cached). Everything
else is constructed per request from those settings, so no mutable client
state is shared between deliveries.

Dependency graph:
    Settings (cached)
        ├── StripeService
        │       └── OrderExtractor ──┐
        └── httpx.AsyncClient         ├── WebhookHandler
                └── sinks ── NotificationFanout ┘

Testing:
    Override any provider with ``app.dependency_overrides``; the usual ones
    are ``get_settings`` and ``get_http_client``.
"""

from collections.abc import AsyncIterator

import httpx
from fastapi import Depends

from checkout_notifier.config import Settings, get_settings
from checkout_notifier.services.notification_fanout import NotificationFanout
from checkout_notifier.services.notifications import build_sinks
from checkout_notifier.services.order_extractor import OrderExtractor
from checkout_notifier.services.stripe_service import StripeService
from checkout_notifier.services.webhook_handler import WebhookHandler


def get_stripe_service(settings: Settings = Depends(get_settings)) -> StripeService:
    """Build the StripeService for this request."""
    return StripeService(settings)


async def get_http_client(
    settings: Settings = Depends(get_settings),
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield a request-scoped HTTP client for the notification sinks."""
    async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
        yield client


def get_webhook_handler(
    settings: Settings = Depends(get_settings),
    stripe_service: StripeService = Depends(get_stripe_service),
    http: httpx.AsyncClient = Depends(get_http_client),
) -> WebhookHandler:
    """Wire the extractor and fan-out for this request."""
    return WebhookHandler(
        extractor=OrderExtractor(stripe_service),
        fanout=NotificationFanout(build_sinks(settings, http)),
    )
