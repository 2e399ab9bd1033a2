"""Tagged result type handed from the pipeline to the transport layer."""

from dataclasses import dataclass
from typing import Optional

from vct_builder.errors import ErrorKind, RosterPipelineError
from vct_builder.models.roster import RosterResult


@dataclass
class PipelineResult:
    """Either a validated roster or the error that stopped the pipeline."""

    roster: Optional[RosterResult] = None
    error: Optional[RosterPipelineError] = None

    @classmethod
    def success(cls, roster: RosterResult) -> "PipelineResult":
        return cls(roster=roster)

    @classmethod
    def failure(cls, error: RosterPipelineError) -> "PipelineResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_kind(self) -> ErrorKind | None:
        return self.error.kind if self.error else None

    @property
    def status_code(self) -> int:
        return self.error.status_code if self.error else 200

    def to_dict(self) -> dict:
        """Serialize to the HTTP response body."""
        if self.error is not None:
            return self.error.to_dict()
        return {"result": self.roster.to_dict()}
