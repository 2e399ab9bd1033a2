"""Thin wrapper around the boto3 ``bedrock-runtime`` client.

The boto3 client is built once by the application lifespan and shared by all
requests; boto3 clients are safe to use from multiple threads.
"""

import logging
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from vct_builder.config import Settings
from vct_builder.errors import ConfigurationError, InvocationError
from vct_builder.models.invocation import ModelInvocation

logger = logging.getLogger(__name__)


class BedrockRosterClient:
    """Invokes Bedrock models and hands back the raw response body stream."""

    def __init__(self, runtime_client: Any, model_id: str):
        """Initialize the client.

        Args:
            runtime_client: A boto3 ``bedrock-runtime`` client (or a stub)
            model_id: Bedrock model id or inference profile id/ARN
        """
        self._runtime = runtime_client
        self.model_id = model_id

    @classmethod
    def from_settings(cls, settings: Settings) -> "BedrockRosterClient":
        """Build a client with a single attempt and explicit timeouts."""
        if not settings.aws_region:
            raise ConfigurationError("No AWS region configured (AWS_REGION)")

        config = Config(
            connect_timeout=settings.bedrock_connect_timeout,
            read_timeout=settings.bedrock_read_timeout,
            retries={"total_max_attempts": 1, "mode": "standard"},
        )
        credentials = {}
        if settings.aws_access_key_id and settings.aws_secret_access_key:
            credentials = {
                "aws_access_key_id": settings.aws_access_key_id,
                "aws_secret_access_key": settings.aws_secret_access_key,
            }
            if settings.aws_session_token:
                credentials["aws_session_token"] = settings.aws_session_token

        runtime = boto3.client(
            "bedrock-runtime",
            region_name=settings.aws_region,
            config=config,
            **credentials,
        )
        logger.info(f"Bedrock client ready: region={settings.aws_region} model={settings.bedrock_model_id}")
        return cls(runtime, settings.bedrock_model_id)

    def invoke(self, invocation: ModelInvocation) -> Any:
        """Invoke the model once and return the response body stream.

        Raises:
            InvocationError: If Bedrock rejects the call or cannot be reached
        """
        try:
            response = self._runtime.invoke_model(**invocation.to_boto_kwargs())
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            raise InvocationError(f"Bedrock rejected invocation ({code}): {e}", detail=code) from e
        except BotoCoreError as e:
            raise InvocationError(f"Bedrock invocation failed: {e}") from e

        body: Optional[Any] = response.get("body")
        if body is None:
            raise InvocationError("Bedrock response has no body")
        return body

    def close(self) -> None:
        close = getattr(self._runtime, "close", None)
        if callable(close):
            close()
