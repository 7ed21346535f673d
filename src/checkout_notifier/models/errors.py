"""Error codes for the checkout webhook receiver.

Only failures that happen before any side effect are surfaced to the
payment provider; everything later is logged and acknowledged.
"""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Error codes that map to a non-2xx webhook response."""

    METHOD_NOT_ALLOWED = "ERR_HTTP_001"
    BODY_UNREADABLE = "ERR_HTTP_002"
    INVALID_WEBHOOK_SIGNATURE = "ERR_STRIPE_001"


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.METHOD_NOT_ALLOWED: "Method not allowed",
    ErrorCode.BODY_UNREADABLE: "Unable to read body",
    ErrorCode.INVALID_WEBHOOK_SIGNATURE: "Invalid webhook signature",
}


class WebhookError(Exception):
    """Exception raised when a webhook delivery must be rejected.

    Converted to an HTTP response by the handlers in
    ``checkout_notifier.api.exceptions``.
    """

    def __init__(
        self,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ):
        self.code = code
        self.message = ERROR_MESSAGES[code]
        self.details = details
        super().__init__(self.message)
