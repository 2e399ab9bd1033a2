"""Orchestrates one chat message through the roster pipeline.

validate -> encode -> invoke (single attempt) -> decode -> parse/validate.
The first failing stage short-circuits; every failure comes back as a
``PipelineResult`` so nothing propagates into the serving process.
"""

import logging
import time
from typing import Optional

from vct_builder.config import Settings
from vct_builder.errors import ConfigurationError, InvocationError, RosterPipelineError
from vct_builder.models.result import PipelineResult
from vct_builder.models.roster import RosterResult
from vct_builder.services.bedrock_client import BedrockRosterClient
from vct_builder.services.prompt_encoder import encode, validate_user_message
from vct_builder.services.response_parser import extract_completion_text, parse_roster
from vct_builder.services.stream_decoder import DEFAULT_CHUNK_SIZE, decode

logger = logging.getLogger(__name__)


class RosterService:
    """Turns a user's chat message into a validated roster."""

    def __init__(
        self,
        client: Optional[BedrockRosterClient],
        max_players: int = 5,
        max_tokens: int = 2048,
        temperature: float = 0.3,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        """Initialize the service.

        Args:
            client: Bedrock client, or None when it could not be configured
            max_players: Roster size cap (longer rosters are truncated)
            max_tokens: Generation budget passed to the model
            temperature: Sampling temperature passed to the model
            chunk_size: Read size used when draining the response stream
        """
        self.client = client
        self.max_players = max_players
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.chunk_size = chunk_size

    @classmethod
    def from_settings(
        cls, settings: Settings, client: Optional[BedrockRosterClient]
    ) -> "RosterService":
        return cls(
            client,
            max_players=settings.max_roster_size,
            max_tokens=settings.bedrock_max_tokens,
            temperature=settings.bedrock_temperature,
            chunk_size=settings.stream_chunk_size,
        )

    def handle(self, user_message: str) -> PipelineResult:
        """Run the full pipeline for one message. Never raises."""
        started = time.perf_counter()
        try:
            result = PipelineResult.success(self._run(user_message))
        except RosterPipelineError as e:
            self._log_failure(e)
            result = PipelineResult.failure(e)
        except Exception as e:
            logger.exception(f"Unexpected roster pipeline failure: {e}")
            result = PipelineResult.failure(InvocationError(f"Unexpected failure: {e}"))

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"Roster request finished: status={result.status_code} in {elapsed_ms:.0f}ms")
        return result

    def _run(self, user_message: str) -> RosterResult:
        # Input errors take priority so a blank message is a 400 even when misconfigured
        validate_user_message(user_message)
        if self.client is None:
            raise ConfigurationError("Bedrock client is not configured")

        invocation = encode(
            user_message,
            model_id=self.client.model_id,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            max_players=self.max_players,
        )
        logger.info(f"Invoking {invocation.model_id} for roster request ({len(user_message)} chars)")

        stream = self.client.invoke(invocation)
        body_text = decode(stream, chunk_size=self.chunk_size)
        logger.debug(f"Raw Bedrock body: {body_text[:1000]!r}")

        completion = extract_completion_text(body_text)
        roster = parse_roster(completion, max_players=self.max_players)
        logger.info(f"Parsed roster with {len(roster.player_data)} players")
        return roster

    def _log_failure(self, error: RosterPipelineError) -> None:
        raw_text = getattr(error, "raw_text", "")
        if raw_text:
            logger.error(f"{error.kind.value}: {error.message}; raw response: {raw_text[:1000]!r}")
        elif error.status_code >= 500:
            logger.error(f"{error.kind.value}: {error.message}")
        else:
            logger.info(f"{error.kind.value}: {error.message}")
