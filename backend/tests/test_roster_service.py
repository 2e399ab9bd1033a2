"""Tests for the roster pipeline orchestrator."""

import io
import json
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from vct_builder.config import Settings
from vct_builder.errors import ErrorKind
from vct_builder.services.bedrock_client import BedrockRosterClient
from vct_builder.services.roster_service import RosterService

ROSTER = {
    "playerData": [
        {
            "ign": "Tenz",
            "name": "Tyson Ngo",
            "team": "SEN",
            "role": "Duelist",
            "agents": ["Jett", "Raze"],
            "metrics": {"impact": 90, "flexibility": 70, "consistency": 85},
            "image": "https://example.com/tenz.png",
        }
    ],
    "additionalOutput": "Balanced roster",
}


def _titan_body(output_text: str) -> io.BytesIO:
    envelope = {
        "inputTextTokenCount": 300,
        "results": [{"tokenCount": 200, "outputText": output_text, "completionReason": "FINISH"}],
    }
    return io.BytesIO(json.dumps(envelope).encode("utf-8"))


@pytest.fixture
def runtime():
    """Mock boto3 bedrock-runtime client."""
    mock = MagicMock()
    mock.invoke_model.return_value = {
        "body": _titan_body(json.dumps(ROSTER)),
        "contentType": "application/json",
    }
    return mock


@pytest.fixture
def service(runtime):
    client = BedrockRosterClient(runtime, "amazon.titan-text-express-v1")
    return RosterService(client, chunk_size=16)


class TestHandleSuccess:
    """Test the happy path through every stage."""

    def test_returns_validated_roster(self, service):
        result = service.handle("Build me a Professional Team")

        assert result.ok
        assert result.status_code == 200
        assert result.roster.player_data[0].ign == "Tenz"
        assert result.roster.additional_output == "Balanced roster"

    def test_invokes_model_once_with_encoded_prompt(self, service, runtime):
        service.handle("Build me a Rising Star Team")

        runtime.invoke_model.assert_called_once()
        kwargs = runtime.invoke_model.call_args.kwargs
        assert kwargs["modelId"] == "amazon.titan-text-express-v1"
        assert kwargs["contentType"] == "application/json"
        assert kwargs["accept"] == "application/json"
        assert "Build me a Rising Star Team" in json.loads(kwargs["body"])["inputText"]

    def test_fenced_output_is_accepted(self, service, runtime):
        fenced = f"Here you go:\n```json\n{json.dumps(ROSTER)}\n```"
        runtime.invoke_model.return_value = {"body": _titan_body(fenced)}

        result = service.handle("Build me a team")
        assert result.ok
        assert result.roster.player_data[0].team == "SEN"

    def test_anthropic_model(self, runtime):
        body = {"content": [{"type": "text", "text": json.dumps(ROSTER)}], "stop_reason": "end_turn"}
        runtime.invoke_model.return_value = {"body": io.BytesIO(json.dumps(body).encode())}
        client = BedrockRosterClient(runtime, "anthropic.claude-3-haiku-20240307-v1:0")

        result = RosterService(client).handle("Build me a team")

        assert result.ok
        sent = json.loads(runtime.invoke_model.call_args.kwargs["body"])
        assert sent["messages"][0]["role"] == "user"

    def test_roster_truncated_to_max_players(self, runtime):
        roster = {"playerData": ROSTER["playerData"] * 7, "additionalOutput": ""}
        runtime.invoke_model.return_value = {"body": _titan_body(json.dumps(roster))}
        client = BedrockRosterClient(runtime, "amazon.titan-text-express-v1")

        result = RosterService(client, max_players=5).handle("Build me a team")
        assert len(result.roster.player_data) == 5


class TestHandleFailures:
    """Each stage failure short-circuits with the right kind and status."""

    @pytest.mark.parametrize("message", ["", "   "])
    def test_blank_message_is_400_without_invoking(self, service, runtime, message):
        result = service.handle(message)

        assert result.status_code == 400
        assert result.error_kind == ErrorKind.VALIDATION
        assert result.to_dict() == {"error": "User message is required", "kind": "validation_error"}
        runtime.invoke_model.assert_not_called()

    def test_blank_message_is_400_even_without_client(self):
        result = RosterService(None).handle(" ")
        assert result.status_code == 400

    def test_missing_client_is_configuration_error(self):
        result = RosterService(None).handle("Build me a team")
        assert result.status_code == 500
        assert result.error_kind == ErrorKind.CONFIGURATION

    def test_empty_model_id_is_configuration_error(self, runtime):
        result = RosterService(BedrockRosterClient(runtime, "")).handle("Build me a team")
        assert result.error_kind == ErrorKind.CONFIGURATION
        runtime.invoke_model.assert_not_called()

    def test_client_error_is_invocation_error(self, service, runtime):
        runtime.invoke_model.side_effect = ClientError(
            {"Error": {"Code": "AccessDeniedException", "Message": "denied"}},
            "InvokeModel",
        )
        result = service.handle("Build me a team")

        assert result.status_code == 500
        assert result.error_kind == ErrorKind.INVOCATION
        assert result.error.detail == "AccessDeniedException"
        runtime.invoke_model.assert_called_once()

    def test_connection_error_is_not_retried(self, service, runtime):
        runtime.invoke_model.side_effect = EndpointConnectionError(endpoint_url="https://bedrock")
        result = service.handle("Build me a team")

        assert result.error_kind == ErrorKind.INVOCATION
        assert runtime.invoke_model.call_count == 1

    def test_stream_failure_is_stream_read_error(self, service, runtime):
        body = MagicMock()
        body.read.side_effect = ConnectionResetError("reset by peer")
        runtime.invoke_model.return_value = {"body": body}

        result = service.handle("Build me a team")
        assert result.error_kind == ErrorKind.STREAM_READ
        assert result.status_code == 500

    def test_non_json_completion_is_malformed(self, service, runtime):
        runtime.invoke_model.return_value = {"body": _titan_body("Sorry, I cannot help with that.")}

        result = service.handle("Build me a team")
        assert result.error_kind == ErrorKind.MALFORMED_RESPONSE
        assert result.error.raw_text == "Sorry, I cannot help with that."
        assert result.roster is None

    def test_unexpected_exception_is_contained(self, service, runtime):
        runtime.invoke_model.side_effect = RuntimeError("boom")

        result = service.handle("Build me a team")
        assert result.status_code == 500
        assert result.error_kind == ErrorKind.INVOCATION


class TestFromSettings:
    def test_settings_are_applied(self, runtime):
        settings = Settings(max_roster_size=3, bedrock_max_tokens=512, stream_chunk_size=8)
        client = BedrockRosterClient(runtime, "amazon.titan-text-express-v1")

        service = RosterService.from_settings(settings, client)

        assert service.max_players == 3
        assert service.max_tokens == 512
        assert service.chunk_size == 8
        assert service.client is client
