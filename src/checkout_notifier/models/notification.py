"""Typed outcomes of collaborator calls and notification sinks."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SinkStatus(str, Enum):
    """Outcome of a single notification sink."""

    SENT = "sent"
    SKIPPED_NOT_CONFIGURED = "skipped_not_configured"
    FAILED = "failed"


class SinkResult(BaseModel):
    """Per-sink outcome, collected for logging only.

    A failed sink never changes the webhook response or stops later sinks.
    """

    model_config = ConfigDict(frozen=True)

    sink: str = Field(..., examples=["customer_email", "merchant_email", "automation_push"])
    status: SinkStatus
    reason: str | None = None

    @classmethod
    def sent(cls, sink: str) -> "SinkResult":
        return cls(sink=sink, status=SinkStatus.SENT)

    @classmethod
    def skipped(cls, sink: str, reason: str) -> "SinkResult":
        return cls(sink=sink, status=SinkStatus.SKIPPED_NOT_CONFIGURED, reason=reason)

    @classmethod
    def failed(cls, sink: str, reason: str) -> "SinkResult":
        return cls(sink=sink, status=SinkStatus.FAILED, reason=reason)


class DeliveryResult(BaseModel):
    """Result of one outbound HTTP call (email provider or automation hook)."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    status_code: int | None = None
    detail: str | None = None

    @property
    def failure_reason(self) -> str:
        if self.status_code is None:
            return self.detail or "unknown error"
        if self.detail:
            return f"HTTP {self.status_code}: {self.detail}"
        return f"HTTP {self.status_code}"
