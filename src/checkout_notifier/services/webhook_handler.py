"""Webhook handler for verified Stripe events.

Provides business logic for handling webhook events separate from
HTTP routing concerns. Only ``checkout.session.completed`` triggers
notifications; every other event type is acknowledged and ignored.

Once an event has been verified nothing in here raises: failures are
logged and reported in the returned WebhookOutcome, and the route still
answers 200 so Stripe does not redeliver an already charged order.
"""

from pydantic import BaseModel, ConfigDict, Field

from checkout_notifier.models.notification import SinkResult
from checkout_notifier.models.stripe_webhook import CheckoutSessionCompleted, VerifiedEvent
from checkout_notifier.services.notification_fanout import NotificationFanout
from checkout_notifier.services.order_extractor import OrderExtractor
from checkout_notifier.utils.logging import get_logger, log_webhook_event

logger = get_logger(__name__)


class WebhookOutcome(BaseModel):
    """What happened to one verified event."""

    model_config = ConfigDict(frozen=True)

    event_id: str
    event_type: str
    processing_result: str = Field(
        ...,
        description="processed, ignored or error",
        examples=["processed"],
    )
    sink_results: list[SinkResult] = Field(default_factory=list)
    error_message: str | None = None


class WebhookHandler:
    """Routes verified events to order extraction and notification fan-out."""

    def __init__(self, extractor: OrderExtractor, fanout: NotificationFanout) -> None:
        self._extractor = extractor
        self._fanout = fanout

    async def handle_event(self, event: VerifiedEvent) -> WebhookOutcome:
        """Process a verified event.

        Args:
            event: Event returned by StripeService.verify_webhook_signature

        Returns:
            WebhookOutcome describing what was done.
        """
        if not isinstance(event, CheckoutSessionCompleted):
            log_webhook_event(logger, event.event_type, event.event_id, result="ignored")
            return WebhookOutcome(
                event_id=event.event_id,
                event_type=event.event_type,
                processing_result="ignored",
            )

        return await self.process_checkout_completed(event)

    async def process_checkout_completed(
        self, event: CheckoutSessionCompleted
    ) -> WebhookOutcome:
        """Extract the order and notify every configured sink."""
        try:
            order = await self._extractor.extract(event.session)
            sink_results = await self._fanout.dispatch(order)
        except Exception as e:
            logger.exception(
                "Failed to process checkout session %s", event.session_id
            )
            log_webhook_event(
                logger,
                event.event_type,
                event.event_id,
                session_id=event.session_id,
                result="error",
                error=str(e),
            )
            return WebhookOutcome(
                event_id=event.event_id,
                event_type=event.event_type,
                processing_result="error",
                error_message=f"{type(e).__name__}: {e}",
            )

        log_webhook_event(
            logger,
            event.event_type,
            event.event_id,
            session_id=event.session_id,
            result="processed",
        )
        return WebhookOutcome(
            event_id=event.event_id,
            event_type=event.event_type,
            processing_result="processed",
            sink_results=sink_results,
        )
