"""Integration tests for the complete checkout notification flow.

Runs signed events through the real app: signature check, order extraction
with line item lookup, and all three notification sinks against a fake
transport standing in for Resend and the automation hook.
"""

from unittest.mock import MagicMock

import httpx
import pytest
import stripe
from starlette.status import HTTP_200_OK

from checkout_notifier.api.main import app
from checkout_notifier.config import get_settings

from conftest import (
    TEST_OWNER_EMAIL,
    TEST_SESSION_ID,
    FakeProviders,
    create_checkout_completed_event,
)

pytestmark = pytest.mark.integration


class TestCompletedCheckout:
    """A paid checkout notifies customer, owner and the automation hook."""

    def test_all_sinks_called_in_order(self, post_event, providers: FakeProviders) -> None:
        response = post_event(create_checkout_completed_event())

        assert response.status_code == HTTP_200_OK
        assert providers.sinks_called == [
            "customer_email",
            "merchant_email",
            "automation_push",
        ]

    def test_customer_email_contains_formatted_amount(
        self, post_event, providers: FakeProviders
    ) -> None:
        post_event(
            create_checkout_completed_event(
                amount_total=1990, currency="czk", email="a@b.cz", name="Alena"
            )
        )

        [email] = providers.calls("customer_email")
        assert email["to"] == "a@b.cz"
        assert email["from"] == "Shop <orders@shop.example>"
        assert "Alena" in email["subject"]
        assert "19.90 CZK" in email["text"]

    def test_email_request_uses_bearer_token(self, post_event, providers: FakeProviders) -> None:
        post_event(create_checkout_completed_event())

        resend_request = providers.requests[0]
        assert resend_request.url == "https://api.resend.com/emails"
        assert resend_request.headers["Authorization"] == "Bearer re_test_key"

    def test_owner_email_lists_order_details(self, post_event, providers: FakeProviders) -> None:
        post_event(create_checkout_completed_event())

        [email] = providers.calls("merchant_email")
        assert email["to"] == TEST_OWNER_EMAIL
        assert email["subject"] == "New order"
        assert "Name: Alena" in email["text"]
        assert "Customer email: a@b.cz" in email["text"]
        assert "Amount: 19.90 CZK" in email["text"]
        assert "Product(s): Snail ceramic mug" in email["text"]

    def test_automation_push_payload(self, post_event, providers: FakeProviders) -> None:
        post_event(create_checkout_completed_event())

        [payload] = providers.calls("automation_push")
        assert payload["email"] == "a@b.cz"
        assert payload["name"] == "Alena"
        assert payload["amount"] == 19.9
        assert payload["currency"] == "CZK"
        assert payload["product"] == "Snail ceramic mug"
        assert payload["createdAtUtc"].endswith("Z")
        assert len(payload["createdAt"]) == len("18.10.2026 12:00:00")

    def test_line_items_requested_with_expansion(
        self, post_event, stripe_client: MagicMock
    ) -> None:
        post_event(create_checkout_completed_event())

        stripe_client.checkout.sessions.retrieve.assert_called_once_with(
            TEST_SESSION_ID,
            params={"expand": ["line_items", "line_items.data.price.product"]},
        )


class TestPartialFailures:
    """Downstream failures are logged and never change the 200 answer."""

    def test_missing_customer_email_skips_only_customer_sink(
        self, post_event, providers: FakeProviders
    ) -> None:
        response = post_event(create_checkout_completed_event(email=None))

        assert response.status_code == HTTP_200_OK
        assert providers.sinks_called == ["merchant_email", "automation_push"]
        [email] = providers.calls("merchant_email")
        assert "Customer email: not provided" in email["text"]

    def test_merchant_email_failure_still_pushes(
        self, post_event, providers: FakeProviders
    ) -> None:
        providers.failures["merchant_email"] = httpx.ConnectError("connection refused")

        response = post_event(create_checkout_completed_event())

        assert response.status_code == HTTP_200_OK
        assert providers.sinks_called == [
            "customer_email",
            "merchant_email",
            "automation_push",
        ]

    def test_enrichment_failure_uses_placeholder(
        self,
        post_event,
        providers: FakeProviders,
        stripe_client: MagicMock,
    ) -> None:
        stripe_client.checkout.sessions.retrieve.side_effect = stripe.APIConnectionError(
            "Stripe unreachable"
        )

        response = post_event(create_checkout_completed_event())

        assert response.status_code == HTTP_200_OK
        [payload] = providers.calls("automation_push")
        assert payload["product"] == "Unknown product"
        [email] = providers.calls("merchant_email")
        assert "Product(s): Unknown product" in email["text"]

    def test_unexpected_enrichment_error_still_notifies_everyone(
        self,
        post_event,
        providers: FakeProviders,
        stripe_client: MagicMock,
    ) -> None:
        stripe_client.checkout.sessions.retrieve.side_effect = RuntimeError("sdk blew up")

        response = post_event(create_checkout_completed_event())

        assert response.status_code == HTTP_200_OK
        assert providers.sinks_called == [
            "customer_email",
            "merchant_email",
            "automation_push",
        ]
        [payload] = providers.calls("automation_push")
        assert payload["product"] == "Unknown product"

    def test_malformed_line_items_still_notifies_everyone(
        self,
        post_event,
        providers: FakeProviders,
        stripe_client: MagicMock,
    ) -> None:
        stripe_client.checkout.sessions.retrieve.return_value = {"line_items": {"data": 5}}

        response = post_event(create_checkout_completed_event())

        assert response.status_code == HTTP_200_OK
        assert providers.sinks_called == [
            "customer_email",
            "merchant_email",
            "automation_push",
        ]
        [email] = providers.calls("customer_email")
        assert "Alena" in email["subject"]

    def test_missing_name_defaults_to_customer(
        self, post_event, providers: FakeProviders
    ) -> None:
        post_event(create_checkout_completed_event(name=None))

        [payload] = providers.calls("automation_push")
        assert payload["name"] == "customer"


class TestUnconfiguredSinks:
    """Sinks without configuration are skipped, not failed."""

    def test_no_sinks_configured_still_returns_200(
        self, client, post_event, providers: FakeProviders, test_settings
    ) -> None:
        bare = test_settings.model_copy(
            update={"resend_api_key": None, "email_owner": None, "make_webhook_url": None}
        )
        app.dependency_overrides[get_settings] = lambda: bare

        response = post_event(create_checkout_completed_event())

        assert response.status_code == HTTP_200_OK
        assert providers.requests == []
