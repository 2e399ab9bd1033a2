"""Roster models returned to the browser."""

from dataclasses import dataclass, field


@dataclass
class PlayerMetrics:
    """Percent-style ratings. Expected 0-100 but never clamped."""

    impact: float = 0.0
    flexibility: float = 0.0
    consistency: float = 0.0

    def to_dict(self) -> dict:
        return {
            "impact": self.impact,
            "flexibility": self.flexibility,
            "consistency": self.consistency,
        }


@dataclass
class PlayerRecord:
    """One player card in a proposed roster."""

    ign: str
    name: str
    team: str
    role: str  # Duelist, Initiator, Controller, Sentinel, Flex
    agents: list[str] = field(default_factory=list)
    metrics: PlayerMetrics = field(default_factory=PlayerMetrics)
    image: str = ""  # URL to player image, may be empty

    def to_dict(self) -> dict:
        return {
            "ign": self.ign,
            "name": self.name,
            "team": self.team,
            "role": self.role,
            "agents": list(self.agents),
            "metrics": self.metrics.to_dict(),
            "image": self.image,
        }


@dataclass
class RosterResult:
    """A validated roster of at most five players plus the model's commentary."""

    player_data: list[PlayerRecord] = field(default_factory=list)
    additional_output: str = ""

    def to_dict(self) -> dict:
        """Serialize using the wire field names the frontend expects."""
        return {
            "playerData": [player.to_dict() for player in self.player_data],
            "additionalOutput": self.additional_output,
        }
