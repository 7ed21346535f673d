"""Notification sinks and their message templates."""

from .sinks import (
    AutomationPushSink,
    CustomerEmailSink,
    MerchantEmailSink,
    NotificationSink,
    build_sinks,
)

__all__ = [
    "AutomationPushSink",
    "CustomerEmailSink",
    "MerchantEmailSink",
    "NotificationSink",
    "build_sinks",
]
