"""Match History Tracker service.

Records one history row per scored profile version and exposes the score
trend of a profile against a job over its versions.
"""

import logging

from fitmatch.errors import MatchingError
from fitmatch.history.models import MatchHistory, TrendPoint
from fitmatch.history.repository import MatchHistoryRepository
from fitmatch.matching.models import MatchResult

logger = logging.getLogger(__name__)


class MatchHistoryTracker:
    """Business logic for recording and querying match history.

    The trend is ordered by profile version, not wall-clock time, and holds
    exactly one point per version ever scored against the job.
    """

    def __init__(self, repository: MatchHistoryRepository):
        """Initialize the tracker.

        Args:
            repository: The MatchHistoryRepository for database access.
        """
        self.repository = repository

    async def record_match(
        self,
        profile_id: str,
        job_id: str,
        match_result: MatchResult,
        profile_version: int,
    ) -> MatchHistory:
        """Record a scoring run, replacing an earlier run of the same version.

        Args:
            profile_id: The scored profile.
            job_id: The job scored against.
            match_result: The result to store.
            profile_version: The profile version that was scored.

        Returns:
            The stored history row.

        Raises:
            MatchingError: VALIDATION_ERROR for blank ids or a version below 1.
        """
        if not profile_id or not job_id:
            raise MatchingError.validation("profile_id and job_id are required")
        if profile_version < 1:
            raise MatchingError.validation(
                f"profile_version must be >= 1 (got {profile_version})"
            )

        entry = MatchHistory(
            profile_id=profile_id,
            job_id=job_id,
            profile_version=profile_version,
            match_result=match_result,
        )
        await self.repository.upsert(entry)
        logger.info(
            "Recorded match profile=%s job=%s version=%d score=%.3f",
            profile_id,
            job_id,
            profile_version,
            match_result.overall_score,
        )
        return entry

    async def get_trend(self, profile_id: str, job_id: str) -> list[TrendPoint]:
        """Score trend for a profile/job pair, ascending by profile version."""
        entries = await self.repository.find_by_pair(profile_id, job_id)
        return [
            TrendPoint(
                score=entry.match_result.overall_score,
                date=entry.created_at,
                version=entry.profile_version,
            )
            for entry in entries
        ]

    async def get_history(self, profile_id: str, job_id: str) -> list[MatchHistory]:
        """Full history rows for a profile/job pair, ascending by version."""
        return await self.repository.find_by_pair(profile_id, job_id)

    async def get_latest(self, profile_id: str, job_id: str) -> MatchHistory | None:
        return await self.repository.find_latest(profile_id, job_id)

    async def get_profile_history(self, profile_id: str) -> list[MatchHistory]:
        """History of a profile across all jobs, newest first."""
        return await self.repository.find_by_profile(profile_id)

    async def get_job_history(self, job_id: str) -> list[MatchHistory]:
        """History of a job across all profiles, newest first."""
        return await self.repository.find_by_job(job_id)
