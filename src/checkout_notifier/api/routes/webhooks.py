"""Webhook endpoint for Stripe checkout events.

Receives ``checkout.session.completed`` and notifies the customer, the shop
owner and the automation hook. Does NOT require authentication; the payload
is authenticated by its Stripe signature.

Response contract (Stripe redelivers anything that is not 2xx):
- 405: wrong method
- 400: body could not be read, or signature verification failed
- 200: everything else, including ignored event types and failed notifications
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from starlette.requests import ClientDisconnect

from checkout_notifier.api.dependencies import get_stripe_service, get_webhook_handler
from checkout_notifier.models.errors import ErrorCode, WebhookError
from checkout_notifier.services.stripe_service import StripeService, StripeServiceError
from checkout_notifier.services.webhook_handler import WebhookHandler
from checkout_notifier.utils.logging import get_logger, log_webhook_event

logger = get_logger(__name__)

router = APIRouter(tags=["webhooks"])

WEBHOOK_PATH = "/webhooks/stripe"
SIGNATURE_HEADER = "Stripe-Signature"

# Registered for every method so the wrong ones get our own 405 body
ACCEPTED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


async def read_raw_body(request: Request) -> bytes:
    """Read the request body exactly as sent.

    The signature is computed over these bytes, so nothing is decoded or
    parsed here.

    Raises:
        WebhookError: BODY_UNREADABLE if the stream breaks before completion.
    """
    chunks: list[bytes] = []
    try:
        async for chunk in request.stream():
            chunks.append(chunk)
    except (ClientDisconnect, RuntimeError, OSError) as e:
        logger.error("Failed to read webhook body: %s", e)
        raise WebhookError(ErrorCode.BODY_UNREADABLE) from e
    return b"".join(chunks)


@router.api_route(
    WEBHOOK_PATH,
    methods=ACCEPTED_METHODS,
    summary="Receive Stripe webhook events",
    description="""
Endpoint for Stripe webhook events. Handles:
- checkout.session.completed: sends customer and owner emails and pushes the order to the automation hook

Other event types are acknowledged with 200 and ignored.

**No authentication required** - signature is verified using the Stripe webhook secret.
""",
    response_class=PlainTextResponse,
    responses={
        200: {"description": "Event accepted (processed or ignored)"},
        400: {"description": "Unreadable body or invalid signature"},
        405: {"description": "Method other than POST"},
    },
)
async def handle_stripe_webhook(
    request: Request,
    stripe_service: StripeService = Depends(get_stripe_service),
    handler: WebhookHandler = Depends(get_webhook_handler),
) -> PlainTextResponse:
    """Handle incoming Stripe webhook events.

    Reads the raw body, verifies the signature and hands the event to the
    WebhookHandler.
    """
    if request.method != "POST":
        raise WebhookError(ErrorCode.METHOD_NOT_ALLOWED)

    payload = await read_raw_body(request)
    signature = request.headers.get(SIGNATURE_HEADER)

    try:
        event = stripe_service.verify_webhook_signature(payload, signature)
    except StripeServiceError as e:
        log_webhook_event(logger, None, None, result="rejected", error=str(e))
        raise WebhookError(
            ErrorCode.INVALID_WEBHOOK_SIGNATURE,
            details={"message": str(e)},
        ) from e

    log_webhook_event(logger, event.event_type, event.event_id, result="received")

    outcome = await handler.handle_event(event)
    logger.info(
        "Webhook %s handled: %s", outcome.event_id, outcome.processing_result
    )

    return PlainTextResponse("OK")
