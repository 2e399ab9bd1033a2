"""Business logic services."""

from vct_builder.services.bedrock_client import BedrockRosterClient
from vct_builder.services.news_client import (
    MockNewsClient,
    NewsClient,
    get_news_client,
)
from vct_builder.services.roster_service import RosterService

__all__ = [
    "BedrockRosterClient",
    "MockNewsClient",
    "NewsClient",
    "RosterService",
    "get_news_client",
]
