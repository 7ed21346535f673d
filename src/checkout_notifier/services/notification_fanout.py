"""Dispatch one order to every notification sink, isolating failures."""

from collections.abc import Sequence

from checkout_notifier.models.notification import SinkResult, SinkStatus
from checkout_notifier.models.order import OrderRecord
from checkout_notifier.services.notifications.sinks import NotificationSink
from checkout_notifier.utils.logging import get_logger, log_notification_result

logger = get_logger(__name__)


class NotificationFanout:
    """Runs each sink once, in order, and collects their results.

    Sinks are awaited one after another. A sink that raises is recorded as
    failed and the remaining sinks still run; nothing propagates to the caller.
    """

    def __init__(self, sinks: Sequence[NotificationSink]) -> None:
        self._sinks = list(sinks)

    @property
    def sink_names(self) -> list[str]:
        return [sink.name for sink in self._sinks]

    async def dispatch(self, order: OrderRecord) -> list[SinkResult]:
        """Send the order to every sink.

        Args:
            order: The order to notify about

        Returns:
            One SinkResult per sink, in dispatch order.
        """
        results: list[SinkResult] = []
        logger.info(
            "Dispatching order %s to %s", order.session_id, ", ".join(self.sink_names)
        )

        for sink in self._sinks:
            try:
                result = await sink.send(order)
            except Exception as e:
                logger.exception("Notification sink %s raised", sink.name)
                result = SinkResult.failed(sink.name, f"{type(e).__name__}: {e}")

            log_notification_result(
                logger,
                result.sink,
                result.status.value,
                reason=result.reason,
                session_id=order.session_id,
            )
            results.append(result)

        failed = [r.sink for r in results if r.status is SinkStatus.FAILED]
        if failed:
            logger.error(
                "Order %s: %d of %d notifications failed (%s); manual follow-up needed",
                order.session_id,
                len(failed),
                len(results),
                ", ".join(failed),
            )

        return results
