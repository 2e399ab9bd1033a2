"""Data models for the VCT team builder."""

from vct_builder.models.invocation import ModelInvocation
from vct_builder.models.news import NewsItem
from vct_builder.models.result import PipelineResult
from vct_builder.models.roster import PlayerMetrics, PlayerRecord, RosterResult

__all__ = [
    "ModelInvocation",
    "NewsItem",
    "PipelineResult",
    "PlayerMetrics",
    "PlayerRecord",
    "RosterResult",
]
