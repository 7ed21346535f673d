"""Runtime configuration for the webhook receiver.

Values come from environment variables. When ``SSM_PARAMETER_PREFIX`` is set,
secrets that are not present in the environment are read from SSM Parameter
Store under that prefix. Only the signing secret is essential: without it every
delivery fails verification. Every other value just switches a feature off.
"""

import math
import os
from collections.abc import Mapping
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field

from checkout_notifier.services.ssm_service import SSMService, get_ssm_service
from checkout_notifier.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_EMAIL_FROM = "Orders <noreply@example.com>"
DEFAULT_TIMEZONE = "Europe/Prague"

# Env var -> SSM parameter suffix
SSM_SECRETS: dict[str, str] = {
    "STRIPE_WEBHOOK_SECRET": "/stripe/webhook_secret",
    "STRIPE_SECRET_KEY": "/stripe/secret_key",
    "RESEND_API_KEY": "/resend/api_key",
}


def _positive_number(raw: str | None, name: str, default: float) -> float:
    """Parse an optional numeric setting, falling back to the default.

    Unparseable or non-positive values are logged, not raised, so a typo in
    an optional variable cannot stop the receiver from starting.
    """
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("%s=%r is not a number; using default %s", name, raw, default)
        return default
    if not math.isfinite(value) or value <= 0:
        logger.warning("%s=%r must be a positive number; using default %s", name, raw, default)
        return default
    return value


class Settings(BaseModel):
    """Read-only settings, built once per process."""

    model_config = ConfigDict(frozen=True)

    stripe_webhook_secret: str | None = None
    stripe_secret_key: str | None = None
    webhook_tolerance_seconds: int = Field(default=300, gt=0)

    resend_api_key: str | None = None
    email_from: str = DEFAULT_EMAIL_FROM
    email_owner: str | None = None

    make_webhook_url: str | None = None
    order_timezone: str = DEFAULT_TIMEZONE

    http_timeout_seconds: float = Field(default=10.0, gt=0)
    log_level: str = "INFO"

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        ssm: SSMService | None = None,
    ) -> "Settings":
        """Build settings from environment variables (and SSM, if configured).

        Args:
            environ: Mapping to read from. Defaults to os.environ.
            ssm: SSM service for secret lookup. Defaults to the shared instance.

        Returns:
            Frozen Settings instance.
        """
        env = dict(os.environ if environ is None else environ)

        prefix = (env.get("SSM_PARAMETER_PREFIX") or "").rstrip("/")
        if prefix:
            ssm = ssm or get_ssm_service()
            for var, suffix in SSM_SECRETS.items():
                if not env.get(var):
                    value = ssm.get_optional_parameter(f"{prefix}{suffix}")
                    if value:
                        env[var] = value

        def _get(name: str) -> str | None:
            # Empty strings count as unset
            return env.get(name) or None

        settings = cls(
            stripe_webhook_secret=_get("STRIPE_WEBHOOK_SECRET"),
            stripe_secret_key=_get("STRIPE_SECRET_KEY"),
            webhook_tolerance_seconds=max(
                1,
                int(_positive_number(_get("STRIPE_WEBHOOK_TOLERANCE"), "STRIPE_WEBHOOK_TOLERANCE", 300)),
            ),
            resend_api_key=_get("RESEND_API_KEY"),
            email_from=_get("EMAIL_FROM") or DEFAULT_EMAIL_FROM,
            email_owner=_get("EMAIL_OWNER"),
            make_webhook_url=_get("MAKE_WEBHOOK_URL"),
            order_timezone=_get("ORDER_TIMEZONE") or DEFAULT_TIMEZONE,
            http_timeout_seconds=_positive_number(
                _get("HTTP_TIMEOUT_SECONDS"), "HTTP_TIMEOUT_SECONDS", 10.0
            ),
            log_level=_get("LOG_LEVEL") or "INFO",
        )

        if not settings.stripe_webhook_secret:
            logger.error("STRIPE_WEBHOOK_SECRET is not set; every webhook will be rejected")

        return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the process-wide Settings instance.

    Tests override this through FastAPI dependency overrides or call
    ``get_settings.cache_clear()``.
    """
    return Settings.from_env()
