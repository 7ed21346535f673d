"""Pytest configuration and fixtures for the checkout webhook receiver tests.

This module provides reusable fixtures for testing:
- Settings with every sink configured
- Stripe signature helpers and sample events
- A fake HTTP transport standing in for Resend and the automation hook
- A TestClient wired with dependency overrides
"""

import hashlib
import hmac
import json
import os
import time
from typing import Any, Generator
from unittest.mock import MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

# === Environment Setup ===

# Set before the app module is imported so get_settings() never sees real secrets
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "whsec_test_secret_for_testing")
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-1")
if not os.environ.get("AWS_PROFILE") and not os.environ.get("AWS_ACCESS_KEY_ID"):
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

from checkout_notifier.api.dependencies import (  # noqa: E402
    get_http_client,
    get_stripe_service,
)
from checkout_notifier.api.main import app  # noqa: E402
from checkout_notifier.config import Settings, get_settings  # noqa: E402
from checkout_notifier.services.stripe_service import StripeService  # noqa: E402

# === Test Configuration ===

TEST_WEBHOOK_SECRET = "whsec_test_secret_for_testing"
TEST_OWNER_EMAIL = "owner@shop.example"
TEST_MAKE_URL = "https://hook.eu1.make.com/test-scenario"
TEST_SESSION_ID = "cs_test_a1B2c3D4"


# === Helper Functions ===


def create_stripe_signature(
    payload: bytes,
    secret: str = TEST_WEBHOOK_SECRET,
    timestamp: int | None = None,
) -> str:
    """Create a valid Stripe webhook signature.

    Stripe signatures use HMAC-SHA256 with format: t={timestamp},v1={signature}
    """
    ts = str(int(time.time()) if timestamp is None else timestamp)
    signed_payload = f"{ts}.{payload.decode('utf-8')}"
    signature = hmac.new(
        secret.encode("utf-8"),
        signed_payload.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return f"t={ts},v1={signature}"


def create_checkout_completed_event(
    event_id: str = "evt_1CheckoutDone",
    session_id: str = TEST_SESSION_ID,
    email: str | None = "a@b.cz",
    name: str | None = "Alena",
    amount_total: int = 1990,
    currency: str = "czk",
) -> dict[str, Any]:
    """Create a checkout.session.completed webhook event."""
    customer_details: dict[str, Any] = {"email": email, "name": name}
    return {
        "id": event_id,
        "object": "event",
        "type": "checkout.session.completed",
        "created": int(time.time()),
        "data": {
            "object": {
                "id": session_id,
                "object": "checkout.session",
                "amount_total": amount_total,
                "currency": currency,
                "payment_status": "paid",
                "customer_details": customer_details,
            },
        },
    }


def create_unhandled_event(event_id: str = "evt_3Unhandled") -> dict[str, Any]:
    """Create an event type the receiver ignores."""
    return {
        "id": event_id,
        "object": "event",
        "type": "payment_intent.created",
        "created": int(time.time()),
        "data": {"object": {"id": "pi_test", "object": "payment_intent"}},
    }


def encode_event(event: dict[str, Any]) -> bytes:
    return json.dumps(event).encode("utf-8")


class FakeProviders:
    """httpx transport handler that plays Resend and the automation hook.

    Failures are keyed by sink name: "customer_email", "merchant_email" or
    "automation_push". A value may be an httpx.Response or an exception to raise.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.failures: dict[str, httpx.Response | Exception] = {}

    @staticmethod
    def sink_for(request: httpx.Request) -> str:
        if request.url.host == "api.resend.com":
            to = json.loads(request.content)["to"]
            return "merchant_email" if to == TEST_OWNER_EMAIL else "customer_email"
        return "automation_push"

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        failure = self.failures.get(self.sink_for(request))
        if isinstance(failure, Exception):
            raise failure
        if failure is not None:
            return failure
        if request.url.host == "api.resend.com":
            return httpx.Response(200, json={"id": "email_0001"})
        return httpx.Response(200, text="Accepted")

    def calls(self, sink: str) -> list[dict[str, Any]]:
        """JSON bodies of the requests made for one sink."""
        return [
            json.loads(r.content) for r in self.requests if self.sink_for(r) == sink
        ]

    @property
    def sinks_called(self) -> list[str]:
        return [self.sink_for(r) for r in self.requests]


# === Fixtures ===


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Clear the cached Settings before and after each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_settings() -> Settings:
    """Settings with every notification sink configured."""
    return Settings(
        stripe_webhook_secret=TEST_WEBHOOK_SECRET,
        stripe_secret_key="sk_test_abc123",
        resend_api_key="re_test_key",
        email_from="Shop <orders@shop.example>",
        email_owner=TEST_OWNER_EMAIL,
        make_webhook_url=TEST_MAKE_URL,
    )


@pytest.fixture
def providers() -> FakeProviders:
    return FakeProviders()


@pytest.fixture
def stripe_client() -> MagicMock:
    """Fake StripeClient returning one expanded line item."""
    client = MagicMock()
    client.checkout.sessions.retrieve.return_value = {
        "id": TEST_SESSION_ID,
        "line_items": {
            "data": [
                {"description": "Snail ceramic mug", "price": {"product": {"name": "Mug"}}},
            ],
        },
    }
    return client


@pytest.fixture
def client(
    test_settings: Settings,
    providers: FakeProviders,
    stripe_client: MagicMock,
) -> Generator[TestClient, None, None]:
    """TestClient with settings, Stripe and outbound HTTP replaced."""

    async def _http_client():
        async with httpx.AsyncClient(transport=httpx.MockTransport(providers)) as http:
            yield http

    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_http_client] = _http_client
    app.dependency_overrides[get_stripe_service] = lambda: StripeService(
        test_settings, client=stripe_client
    )
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def post_event(client: TestClient):
    """Post a correctly signed event and return the response."""

    def _post(event: dict[str, Any], **headers: str) -> httpx.Response:
        payload = encode_event(event)
        return client.post(
            "/api/webhooks/stripe",
            content=payload,
            headers={
                "Stripe-Signature": create_stripe_signature(payload),
                "Content-Type": "application/json",
                **headers,
            },
        )

    return _post
