"""SSM Parameter Store service for secure secret retrieval.

Used when the receiver is deployed with ``SSM_PARAMETER_PREFIX`` so the
Stripe and Resend secrets do not have to live in plain environment variables.
"""

import logging
from functools import lru_cache

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)


class SSMServiceError(Exception):
    """Raised when SSM parameter retrieval fails."""

    pass


class SSMService:
    """Service for retrieving secrets from AWS SSM Parameter Store.

    Usage:
        ssm = SSMService()
        webhook_secret = ssm.get_parameter("/shop/prod/stripe/webhook_secret")
    """

    def __init__(self, client=None) -> None:
        self._client = client or boto3.client("ssm")

    def get_parameter(self, name: str) -> str:
        """Retrieve a decrypted parameter value.

        Args:
            name: Full parameter path (e.g., "/shop/prod/stripe/webhook_secret")

        Returns:
            The decrypted parameter value.

        Raises:
            SSMServiceError: If parameter cannot be retrieved.
        """
        try:
            logger.info("Fetching SSM parameter: %s", name)
            response = self._client.get_parameter(Name=name, WithDecryption=True)
            return response["Parameter"]["Value"]

        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code == "ParameterNotFound":
                raise SSMServiceError(f"SSM parameter not found: {name}") from e
            if error_code == "AccessDeniedException":
                raise SSMServiceError(
                    f"Access denied to SSM parameter: {name}. "
                    "Check IAM permissions for ssm:GetParameter."
                ) from e
            raise SSMServiceError(
                f"Failed to retrieve SSM parameter {name}: {e}"
            ) from e
        except BotoCoreError as e:
            raise SSMServiceError(f"Failed to retrieve SSM parameter {name}: {e}") from e

    def get_optional_parameter(self, name: str) -> str | None:
        """Like get_parameter, but logs and returns None on failure."""
        try:
            return self.get_parameter(name)
        except SSMServiceError as e:
            logger.warning("Optional SSM parameter unavailable: %s", e)
            return None


@lru_cache(maxsize=1)
def get_ssm_service() -> SSMService:
    """Get the shared SSMService instance."""
    return SSMService()
