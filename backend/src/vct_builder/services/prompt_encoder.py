"""Builds the roster prompt and the Bedrock request payload.

The user's message is embedded verbatim in a fixed instruction template that
spells out the exact JSON shape the model has to return. Bedrock model
families do not share a request schema, so the body is shaped by the family
the configured model id belongs to.
"""

import json

from vct_builder.errors import ConfigurationError, ValidationError
from vct_builder.models.invocation import ModelInvocation

DEFAULT_MODEL_ID = "amazon.titan-text-express-v1"
JSON_CONTENT_TYPE = "application/json"
ANTHROPIC_VERSION = "bedrock-2023-05-31"

ROSTER_PROMPT_TEMPLATE = """You are a seasoned data scientist specializing in Valorant team formation.

Instructions: Based on the user's request, generate an optimal team composition for Valorant, including player details such as player name, actual name, current team, role, characters, and key contributions. Return ONLY the data in JSON format with the following structure:

{{
  "playerData": [
    {{
      "ign": "string",
      "name": "string",
      "team": "string",
      "role": "string",
      "agents": ["string", "string"],
      "metrics": {{
        "impact": number,
        "flexibility": number,
        "consistency": number
      }},
      "image": "string"
    }}
  ],
  "additionalOutput": "string"
}}

Rules:
- "playerData" holds at most {max_players} players.
- "image" is a URL to the player's image, or an empty string.
- "metrics" values are percentages from 0 to 100.
- "additionalOutput" explains the composition in a few sentences.

User Request:
"{user_message}"

Response:"""


def validate_user_message(user_message: str) -> str:
    """Return the message unchanged, or raise ValidationError if it is blank."""
    if not isinstance(user_message, str) or not user_message.strip():
        raise ValidationError("User message is required")
    return user_message


def build_prompt(user_message: str, max_players: int = 5) -> str:
    """Embed the user's message in the roster instruction template."""
    return ROSTER_PROMPT_TEMPLATE.format(user_message=user_message, max_players=max_players)


def _model_family(model_id: str) -> str:
    # Matches plain ids, cross-region profiles ("us.anthropic...") and ARNs
    if "amazon.titan-text" in model_id:
        return "titan"
    if "anthropic." in model_id:
        return "anthropic"
    raise ConfigurationError(f"Unsupported Bedrock model family: {model_id}")


def _titan_body(prompt: str, max_tokens: int, temperature: float) -> dict:
    return {
        "inputText": prompt,
        "textGenerationConfig": {
            "maxTokenCount": max_tokens,
            "temperature": temperature,
            "topP": 0.9,
            "stopSequences": [],
        },
    }


def _anthropic_body(prompt: str, max_tokens: int, temperature: float) -> dict:
    return {
        "anthropic_version": ANTHROPIC_VERSION,
        "max_tokens": max_tokens,
        "temperature": temperature,
        "messages": [
            {"role": "user", "content": [{"type": "text", "text": prompt}]}
        ],
    }


def encode(
    user_message: str,
    model_id: str = DEFAULT_MODEL_ID,
    max_tokens: int = 2048,
    temperature: float = 0.3,
    max_players: int = 5,
) -> ModelInvocation:
    """Turn a chat message into a Bedrock ``invoke_model`` request.

    Args:
        user_message: Free text typed by the user, embedded verbatim
        model_id: Bedrock model id or inference profile id/ARN
        max_tokens: Generation budget
        temperature: Sampling temperature
        max_players: Roster size stated in the instructions

    Returns:
        ModelInvocation ready for the Bedrock client

    Raises:
        ValidationError: If the message is empty or whitespace only
        ConfigurationError: If the model id is missing or of an unknown family
    """
    validate_user_message(user_message)
    if not model_id or not model_id.strip():
        raise ConfigurationError("No Bedrock model id configured (BEDROCK_MODEL_ID)")

    prompt = build_prompt(user_message, max_players=max_players)
    family = _model_family(model_id)
    if family == "titan":
        body = _titan_body(prompt, max_tokens, temperature)
    else:
        body = _anthropic_body(prompt, max_tokens, temperature)

    return ModelInvocation(
        model_id=model_id,
        content_type=JSON_CONTENT_TYPE,
        accept=JSON_CONTENT_TYPE,
        body=json.dumps(body, ensure_ascii=False),
    )
