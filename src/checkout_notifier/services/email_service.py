"""Transactional email via the Resend HTTP API."""

import logging

import httpx

from checkout_notifier.models.notification import DeliveryResult

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"


class ResendEmailClient:
    """Sends plain-text emails through Resend.

    The httpx client is owned by the caller (one per webhook request).

    Usage:
        async with httpx.AsyncClient() as http:
            client = ResendEmailClient(http, api_key="re_123")
            result = await client.send(
                sender="Shop <shop@example.com>",
                to="a@b.cz",
                subject="Thanks",
                text="...",
            )
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str,
        api_url: str = RESEND_API_URL,
    ) -> None:
        self._http = http
        self._api_key = api_key
        self._api_url = api_url

    async def send(self, *, sender: str, to: str, subject: str, text: str) -> DeliveryResult:
        """Send one email.

        Args:
            sender: From header, e.g. "Orders <noreply@example.com>"
            to: Recipient address
            subject: Subject line
            text: Plain-text body

        Returns:
            DeliveryResult; transport errors are reported, not raised.
        """
        try:
            response = await self._http.post(
                self._api_url,
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                },
                json={"from": sender, "to": to, "subject": subject, "text": text},
            )
        except httpx.HTTPError as e:
            logger.error("Email request to %s failed: %s", to, e)
            return DeliveryResult(ok=False, detail=f"{type(e).__name__}: {e}")

        if response.is_success:
            return DeliveryResult(ok=True, status_code=response.status_code)

        return DeliveryResult(
            ok=False,
            status_code=response.status_code,
            detail=response.text,
        )
