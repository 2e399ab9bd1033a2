"""News listing models."""

from dataclasses import asdict, dataclass


@dataclass
class NewsItem:
    """A single esports headline."""

    title: str
    url: str
    date: str  # as published by the upstream feed, e.g. "October 18, 2026"

    def to_dict(self) -> dict:
        return asdict(self)
