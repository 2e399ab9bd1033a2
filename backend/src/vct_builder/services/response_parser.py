"""Parses and validates model output into a ``RosterResult``.

The decoded Bedrock body goes through three steps:

1. ``extract_completion_text`` unwraps the provider envelope (Titan's
   ``results[0].outputText``, Anthropic's ``content[*].text``).
2. ``load_json_object`` decodes the JSON object embedded in the completion,
   tolerating markdown fences, reasoning blocks and leading prose.
3. ``parse_roster`` validates the object against the roster schema.

``parse_and_validate`` wraps the steps and never raises; failures come back as
a tagged ``PipelineResult``.
"""

import json
import logging
import math
from typing import Any

from vct_builder.errors import MalformedResponseError
from vct_builder.models.result import PipelineResult
from vct_builder.models.roster import PlayerMetrics, PlayerRecord, RosterResult

logger = logging.getLogger(__name__)

MAX_PLAYERS = 5
REQUIRED_PLAYER_FIELDS = ("ign", "name", "team", "role")
METRIC_FIELDS = ("impact", "flexibility", "consistency")


def extract_completion_text(body_text: str) -> str:
    """Unwrap the model completion from a Bedrock ``invoke_model`` body.

    Bodies that are not JSON, or JSON that is not a known envelope, are
    returned unchanged so the roster parser can report on them.
    """
    try:
        envelope = json.loads(body_text)
    except (json.JSONDecodeError, RecursionError):
        return body_text

    if not isinstance(envelope, dict) or "playerData" in envelope:
        return body_text

    # Amazon Titan text models
    results = envelope.get("results")
    if isinstance(results, list) and results:
        first = results[0]
        if isinstance(first, dict) and isinstance(first.get("outputText"), str):
            completion_reason = first.get("completionReason")
            if completion_reason and completion_reason != "FINISH":
                logger.warning(f"Titan completion ended with reason: {completion_reason}")
            return first["outputText"]

    # Anthropic Messages API
    content = envelope.get("content")
    if isinstance(content, list):
        texts = [
            block.get("text", "")
            for block in content
            if isinstance(block, dict) and block.get("type") == "text"
        ]
        if texts:
            if envelope.get("stop_reason") == "max_tokens":
                logger.warning("Anthropic completion was cut off at max_tokens")
            return "".join(texts)

    return body_text


def _strip_wrappers(content: str) -> str:
    content = content.strip()

    if "<think>" in content:
        think_end = content.rfind("</think>")
        if think_end != -1:
            content = content[think_end + len("</think>"):].strip()

    # Prefer the first fenced block that holds an object
    if "```" in content:
        for block in content.split("```")[1::2]:
            block = block.strip()
            if block.startswith("json"):
                block = block[4:].strip()
            if block.startswith("{"):
                return block
    return content


def load_json_object(content: str) -> dict:
    """Decode the first JSON object embedded in model output.

    Handles:
    - Pure JSON
    - JSON wrapped in ```json ... ``` markdown
    - JSON with <think>...</think> reasoning blocks
    - JSON with leading/trailing prose, including stray braces in the prose

    Raises:
        ValueError: If no complete JSON object is present
    """
    content = _strip_wrappers(content)
    decoder = json.JSONDecoder()

    start = content.find("{")
    while start != -1:
        try:
            data, _ = decoder.raw_decode(content, start)
        except json.JSONDecodeError:
            start = content.find("{", start + 1)
            continue
        if isinstance(data, dict):
            return data
        start = content.find("{", start + 1)

    raise ValueError("No JSON object found in response")


def _require_str(entry: dict, key: str, index: int) -> str:
    value = entry.get(key)
    if not isinstance(value, str):
        raise ValueError(f"playerData[{index}].{key} must be a string, got {type(value).__name__}")
    return value


def _to_number(value: Any, path: str) -> float:
    # bool is an int subclass; true/false are not percentages
    if isinstance(value, bool):
        raise ValueError(f"{path} must be numeric, got bool")
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            raise ValueError(f"{path} is too large to be a percentage") from None
    elif isinstance(value, str):
        try:
            number = float(value.strip().rstrip("%"))
        except ValueError:
            raise ValueError(f"{path} must be numeric, got {value!r}") from None
    else:
        raise ValueError(f"{path} must be numeric, got {type(value).__name__}")
    # NaN and infinities cannot be serialized back to JSON
    if not math.isfinite(number):
        raise ValueError(f"{path} must be a finite number, got {value!r}")
    return number


def _parse_metrics(raw: Any, index: int) -> PlayerMetrics:
    if raw is None:
        return PlayerMetrics()
    if not isinstance(raw, dict):
        raise ValueError(f"playerData[{index}].metrics must be an object")
    values = {}
    for name in METRIC_FIELDS:
        value = raw.get(name)
        values[name] = 0.0 if value is None else _to_number(value, f"playerData[{index}].metrics.{name}")
    return PlayerMetrics(**values)


def _parse_player(entry: Any, index: int) -> PlayerRecord:
    if not isinstance(entry, dict):
        raise ValueError(f"playerData[{index}] must be an object")

    fields = {key: _require_str(entry, key, index) for key in REQUIRED_PLAYER_FIELDS}

    agents = entry.get("agents")
    if not isinstance(agents, list) or not all(isinstance(a, str) for a in agents):
        raise ValueError(f"playerData[{index}].agents must be a list of strings")

    image = entry.get("image")
    if image is None:
        image = ""
    elif not isinstance(image, str):
        raise ValueError(f"playerData[{index}].image must be a string")

    return PlayerRecord(
        agents=list(agents),
        metrics=_parse_metrics(entry.get("metrics"), index),
        image=image,
        **fields,
    )


def _parse_roster_data(data: Any, max_players: int) -> RosterResult:
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    if "playerData" not in data:
        raise ValueError("Missing 'playerData' key in response")

    players = data["playerData"]
    if not isinstance(players, list):
        raise ValueError("'playerData' must be a list")
    if len(players) > max_players:
        logger.warning(f"Model returned {len(players)} players, truncating to {max_players}")
        players = players[:max_players]

    additional_output = data.get("additionalOutput")
    if additional_output is None:
        additional_output = ""
    elif not isinstance(additional_output, str):
        raise ValueError("'additionalOutput' must be a string")

    return RosterResult(
        player_data=[_parse_player(entry, i) for i, entry in enumerate(players)],
        additional_output=additional_output,
    )


def parse_roster(raw_text: str, max_players: int = MAX_PLAYERS) -> RosterResult:
    """Parse model output into a validated roster.

    More than ``max_players`` entries are truncated to the first ones in
    model order. Missing ``metrics`` default to zeros; metric values outside
    0-100 are kept as returned.

    Raises:
        MalformedResponseError: If the text is not JSON or violates the schema
    """
    try:
        data = load_json_object(raw_text)
        return _parse_roster_data(data, max_players)
    except (ValueError, TypeError, OverflowError, RecursionError) as e:
        # json.JSONDecodeError is a ValueError
        raise MalformedResponseError(f"Invalid roster response: {e}", raw_text=raw_text) from e


def parse_and_validate(raw_text: str, max_players: int = MAX_PLAYERS) -> PipelineResult:
    """Parse model output, returning a tagged result instead of raising."""
    try:
        return PipelineResult.success(parse_roster(raw_text, max_players=max_players))
    except MalformedResponseError as e:
        logger.error(f"{e.message}; raw response: {e.raw_text[:500]!r}")
        return PipelineResult.failure(e)
