"""Structured logging utilities with correlation ID support.

Provides:
- Correlation ID context management for request tracing
- Structured logging formatter for consistent log output
- Helper functions for webhook and notification logging

Usage:
    from checkout_notifier.utils.logging import get_logger, set_correlation_id

    # In middleware/request handler:
    set_correlation_id(request.headers.get("X-Correlation-ID"))

    # In service code:
    logger = get_logger(__name__)
    logger.info("Order received", extra={"session_id": "cs_123"})
"""

import logging
import uuid
from contextvars import ContextVar
from typing import Any

# Context variable for correlation ID - thread-safe and async-safe
_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)

NO_CORRELATION_ID = "no-correlation-id"


def generate_correlation_id() -> str:
    """Generate a new correlation ID.

    Returns:
        UUID-based correlation ID string
    """
    return str(uuid.uuid4())


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Set the correlation ID for the current request context.

    Args:
        correlation_id: Optional existing correlation ID. If None, generates new one.

    Returns:
        The correlation ID that was set
    """
    cid = correlation_id or generate_correlation_id()
    _correlation_id.set(cid)
    return cid


def get_correlation_id() -> str | None:
    """Get the current correlation ID.

    Returns:
        Correlation ID of the delivery being handled, or None outside a request
    """
    return _correlation_id.get()


def clear_correlation_id() -> None:
    """Clear the correlation ID context."""
    _correlation_id.set(None)


class CorrelationIdFilter(logging.Filter):
    """Logging filter that adds correlation_id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Stamp the record with the current correlation ID.

        Args:
            record: Log record to modify

        Returns:
            True, records are never dropped
        """
        record.correlation_id = get_correlation_id() or NO_CORRELATION_ID
        return True


class StructuredFormatter(logging.Formatter):
    """Formatter for structured log output with correlation ID."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the record and prefix it with its correlation ID.

        Args:
            record: Log record to format

        Returns:
            Formatted line, e.g. "[3f2a...] Order cs_123 dispatched"
        """
        # Records from loggers created without get_logger() lack the filter
        if not hasattr(record, "correlation_id"):
            record.correlation_id = get_correlation_id() or NO_CORRELATION_ID

        base = super().format(record)

        # Same prefix on every line of one delivery
        return f"[{record.correlation_id}] {base}"


def get_logger(name: str) -> logging.Logger:
    """Get a logger with correlation ID support.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not any(isinstance(f, CorrelationIdFilter) for f in logger.filters):
        logger.addFilter(CorrelationIdFilter())

    return logger


def configure_logging(level: str = "INFO") -> None:
    """Install the structured formatter on the root logger.

    Safe to call more than once; the root handler is only added the first time.

    Args:
        level: Root log level name (DEBUG, INFO, WARNING, ...)
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    if any(isinstance(h.formatter, StructuredFormatter) for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        StructuredFormatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    handler.addFilter(CorrelationIdFilter())
    root.addHandler(handler)


def log_webhook_event(
    logger: logging.Logger,
    event_type: str | None,
    event_id: str | None,
    *,
    session_id: str | None = None,
    result: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log a webhook event with structured context.

    Args:
        logger: Logger instance
        event_type: Stripe event type (e.g., "checkout.session.completed")
        event_id: Stripe event ID
        session_id: Checkout session ID if available
        result: Processing result (received, processed, ignored, rejected, error)
        error: Error message if processing failed
        **extra: Additional context fields
    """
    context: dict[str, Any] = {
        "event_type": event_type,
        "event_id": event_id,
    }

    if session_id:
        context["session_id"] = session_id
    if result:
        context["result"] = result
    if error:
        context["error"] = error

    context.update(extra)

    msg_parts = [f"Webhook event: {event_type} ({event_id})"]
    if result:
        msg_parts.append(f"result={result}")
    if session_id:
        msg_parts.append(f"session={session_id}")
    if error:
        msg_parts.append(f"error={error}")

    message = " | ".join(msg_parts)

    if result in ("rejected", "error"):
        logger.error(message, extra=context)
    else:
        logger.info(message, extra=context)


def log_notification_result(
    logger: logging.Logger,
    sink: str,
    status: str,
    *,
    reason: str | None = None,
    **extra: Any,
) -> None:
    """Log the outcome of one notification sink.

    Args:
        logger: Logger instance
        sink: Sink name (customer_email, merchant_email, automation_push)
        status: Sink status (sent, skipped_not_configured, failed)
        reason: Why the sink was skipped or failed
        **extra: Additional context fields
    """
    context: dict[str, Any] = {"sink": sink, "status": status}
    if reason:
        context["reason"] = reason
    context.update(extra)

    message = f"Notification: {sink} | status={status}"
    if reason:
        message = f"{message} | reason={reason}"

    if status == "failed":
        logger.error(message, extra=context)
    elif status == "skipped_not_configured":
        logger.warning(message, extra=context)
    else:
        logger.info(message, extra=context)
