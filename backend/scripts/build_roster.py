#!/usr/bin/env python3
"""
Build a roster from the command line using the same pipeline as the API.

Reads AWS settings from the environment / .env like the server does.

Usage:
    python backend/scripts/build_roster.py "Build me a Rising Star Team"
    python backend/scripts/build_roster.py "Cross-regional team" --model anthropic.claude-3-haiku-20240307-v1:0
"""

import argparse
import json
import sys

from vct_builder.config import get_settings
from vct_builder.services.bedrock_client import BedrockRosterClient
from vct_builder.services.roster_service import RosterService


def main() -> int:
    parser = argparse.ArgumentParser(description="Build a Valorant roster via Bedrock")
    parser.add_argument("message", help="Roster request, e.g. 'Build me a Professional Team'")
    parser.add_argument("--model", type=str, default=None,
                        help="Override BEDROCK_MODEL_ID")
    parser.add_argument("--compact", action="store_true",
                        help="Print JSON on a single line")
    args = parser.parse_args()

    settings = get_settings()
    if args.model:
        settings = settings.model_copy(update={"bedrock_model_id": args.model})

    client = BedrockRosterClient.from_settings(settings)
    service = RosterService.from_settings(settings, client)
    try:
        result = service.handle(args.message)
    finally:
        client.close()

    print(json.dumps(result.to_dict(), indent=None if args.compact else 2, ensure_ascii=False))
    if not result.ok:
        print(f"Error ({result.error_kind.value}): {result.error.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
