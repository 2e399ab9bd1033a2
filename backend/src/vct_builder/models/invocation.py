"""Outbound model invocation description."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ModelInvocation:
    """Everything ``invoke_model`` needs for one call."""

    model_id: str
    content_type: str
    accept: str
    body: str  # JSON-serialized request payload

    def to_boto_kwargs(self) -> dict:
        """Keyword arguments for ``bedrock-runtime.invoke_model``."""
        return {
            "modelId": self.model_id,
            "contentType": self.content_type,
            "accept": self.accept,
            "body": self.body,
        }
