"""FastAPI exception handlers for converting WebhookError to HTTP responses.

Stripe only looks at the status code, so the bodies stay minimal:
- 405 Method Not Allowed: JSON ``{"error": "Method not allowed"}``
- 400 Bad Request: plain text, either the body read failure or the
  signature verification detail (never contains secret material)

Usage:
    from checkout_notifier.api.exceptions import register_exception_handlers
    register_exception_handlers(app)
"""

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_405_METHOD_NOT_ALLOWED

from checkout_notifier.api.routes.webhooks import WEBHOOK_PATH
from checkout_notifier.models.errors import ErrorCode, WebhookError
from checkout_notifier.utils.logging import get_logger

logger = get_logger(__name__)

# Map ErrorCode to HTTP status codes
ERROR_CODE_TO_HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.METHOD_NOT_ALLOWED: HTTP_405_METHOD_NOT_ALLOWED,
    ErrorCode.BODY_UNREADABLE: HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_WEBHOOK_SIGNATURE: HTTP_400_BAD_REQUEST,
}


def get_http_status_for_error(code: ErrorCode) -> int:
    """Get HTTP status code for an ErrorCode, defaulting to 400."""
    return ERROR_CODE_TO_HTTP_STATUS.get(code, HTTP_400_BAD_REQUEST)


def build_error_response(exc: WebhookError) -> Response:
    """Render a WebhookError the way the payment provider expects it."""
    status_code = get_http_status_for_error(exc.code)

    if exc.code is ErrorCode.METHOD_NOT_ALLOWED:
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.message},
            headers={"Allow": "POST"},
        )

    if exc.code is ErrorCode.INVALID_WEBHOOK_SIGNATURE:
        detail = (exc.details or {}).get("message", exc.message)
        return PlainTextResponse(f"Webhook Error: {detail}", status_code=status_code)

    return PlainTextResponse(exc.message, status_code=status_code)


async def webhook_error_handler(request: Request, exc: WebhookError) -> Response:
    """Handle WebhookError exceptions raised by the webhook route."""
    logger.warning(
        "Rejected %s %s: %s (%s)",
        request.method,
        request.url.path,
        exc.message,
        exc.code.value,
    )
    return build_error_response(exc)


async def starlette_http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> Response:
    """Give router-level 405s on the webhook path the webhook's own body.

    Methods the route does not list (TRACE, custom verbs) are rejected by
    the router before the route runs. Other HTTP errors keep FastAPI's
    default rendering.
    """
    if exc.status_code == HTTP_405_METHOD_NOT_ALLOWED and request.url.path.endswith(
        WEBHOOK_PATH
    ):
        return await webhook_error_handler(request, WebhookError(ErrorCode.METHOD_NOT_ALLOWED))
    return await http_exception_handler(request, exc)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(WebhookError, webhook_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, starlette_http_exception_handler)  # type: ignore[arg-type]
