"""Data models for the Match History Tracker."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from fitmatch.matching.models import MatchResult


@dataclass(frozen=True)
class MatchHistory:
    """One scoring run of a profile version against a job.

    Attributes:
        profile_id: Scored profile.
        job_id: Job scored against.
        profile_version: Profile version that was scored; with the two ids
            this forms the row's unique key.
        match_result: The stored result.
        created_at: When the row was written.
    """

    profile_id: str
    job_id: str
    profile_version: int
    match_result: MatchResult
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict:
        """Serialize the history row to a dictionary."""
        return {
            "profile_id": self.profile_id,
            "job_id": self.job_id,
            "profile_version": self.profile_version,
            "match_result": self.match_result.to_dict(),
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class TrendPoint:
    """A single point of a profile/job score trend."""

    score: float
    date: datetime
    version: int

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "date": self.date.isoformat(),
            "version": self.version,
        }
