"""Error taxonomy for the roster pipeline.

Every failure the pipeline can hit maps to one of these classes. Each carries
an ``ErrorKind`` and the HTTP status the transport layer should answer with.
``message`` is the server-side description; ``public_message`` is the generic
text shown to the user, so diagnostic detail stays in the logs.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Tag identifying which pipeline stage failed."""

    VALIDATION = "validation_error"
    CONFIGURATION = "configuration_error"
    INVOCATION = "invocation_error"
    STREAM_READ = "stream_read_error"
    MALFORMED_RESPONSE = "malformed_response_error"


class RosterPipelineError(Exception):
    """Base class for all roster pipeline failures."""

    kind: ErrorKind = ErrorKind.INVOCATION
    status_code: int = 500
    public_message: str = "Failed to build a roster. Please try again."

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_dict(self) -> dict:
        """Serialize to the public error body."""
        return {"error": self.public_message, "kind": self.kind.value}


class ValidationError(RosterPipelineError):
    """Bad or missing user input."""

    kind = ErrorKind.VALIDATION
    status_code = 400
    public_message = "User message is required"


class ConfigurationError(RosterPipelineError):
    """Required deployment configuration is missing or unusable."""

    kind = ErrorKind.CONFIGURATION
    public_message = "The roster service is not configured correctly."


class InvocationError(RosterPipelineError):
    """The model provider rejected the call or could not be reached."""

    kind = ErrorKind.INVOCATION
    public_message = "The model service could not be reached. Please try again."


class StreamReadError(RosterPipelineError):
    """The transport failed while draining the response stream."""

    kind = ErrorKind.STREAM_READ
    public_message = "The model response was interrupted. Please try again."


class MalformedResponseError(RosterPipelineError):
    """The provider returned text that is not a valid roster."""

    kind = ErrorKind.MALFORMED_RESPONSE
    public_message = "Failed to parse model response"

    def __init__(self, message: str, raw_text: str = "", detail: Optional[str] = None):
        super().__init__(message, detail=detail)
        self.raw_text = raw_text
