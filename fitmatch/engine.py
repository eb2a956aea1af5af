"""Matching service facade.

Ties the scorer, the detailed analyzer and the history tracker to the profile
and job stores, resolving ids to records and recording every calculated match.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any

from fitmatch.collaborators import JobScoreSink, JobSource, ProfileSource
from fitmatch.errors import MatchingError
from fitmatch.history.models import MatchHistory, TrendPoint
from fitmatch.history.service import MatchHistoryTracker
from fitmatch.job.models import Job
from fitmatch.matching.analyzer import DetailedAnalyzer
from fitmatch.matching.models import DetailedMatch, MatchResult
from fitmatch.matching.scorer import MatchScorer
from fitmatch.profile.models import Profile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JobComparison:
    """One job's result when comparing several jobs for a profile."""

    job_id: str
    result: MatchResult

    def to_dict(self) -> dict[str, Any]:
        return {"job_id": self.job_id, "result": self.result.to_dict()}


@dataclass(frozen=True)
class ProfileComparison:
    """One profile's result when comparing several profiles for a job."""

    profile_id: str
    result: MatchResult

    def to_dict(self) -> dict[str, Any]:
        return {"profile_id": self.profile_id, "result": self.result.to_dict()}


class MatchingService:
    """Entry point for scoring stored profiles against stored jobs."""

    def __init__(
        self,
        profiles: ProfileSource,
        jobs: JobSource,
        tracker: MatchHistoryTracker,
        scorer: MatchScorer | None = None,
        analyzer: DetailedAnalyzer | None = None,
    ):
        """Initialize the service.

        Args:
            profiles: Resolves profile ids to their latest version.
            jobs: Resolves job ids to jobs. If it also offers
                ``update_last_match_score``, each calculated score is stored
                on the job.
            tracker: Records history and serves trends.
            scorer: Match scorer; a default one is built if omitted.
            analyzer: Detailed analyzer sharing ``scorer`` if omitted.
        """
        self.profiles = profiles
        self.jobs = jobs
        self.tracker = tracker
        self.scorer = scorer or MatchScorer()
        self.analyzer = analyzer or DetailedAnalyzer(self.scorer)

    async def calculate_match(
        self, profile_id: str, job_id: str, today: date | None = None
    ) -> MatchResult:
        """Score the latest profile version against a job and record it.

        Raises:
            MatchingError: ENTITY_NOT_FOUND if the profile or job is missing,
                INVALID_OPERATION if scoring fails.
        """
        profile = await self._get_profile(profile_id)
        job = await self._get_job(job_id)

        result = self.scorer.score(profile, job, today=today)
        await self.tracker.record_match(profile.id, job.id, result, profile.version)

        if isinstance(self.jobs, JobScoreSink):
            await self.jobs.update_last_match_score(job.id, result.overall_score)

        return result

    async def get_detailed_analysis(
        self, profile_id: str, job_id: str, today: date | None = None
    ) -> DetailedMatch:
        """Detailed analysis of the latest profile version against a job.

        Not recorded in history; use :meth:`calculate_match` for that.
        """
        profile = await self._get_profile(profile_id)
        job = await self._get_job(job_id)
        return self.analyzer.analyze(profile, job, today=today)

    async def get_profile_match_history(self, profile_id: str) -> list[MatchHistory]:
        return await self.tracker.get_profile_history(profile_id)

    async def get_job_match_history(self, job_id: str) -> list[MatchHistory]:
        return await self.tracker.get_job_history(job_id)

    async def get_matching_trend(self, profile_id: str, job_id: str) -> list[TrendPoint]:
        return await self.tracker.get_trend(profile_id, job_id)

    async def compare_jobs(
        self, profile_id: str, job_ids: list[str], today: date | None = None
    ) -> list[JobComparison]:
        """Score one profile against several jobs, best match first.

        Comparisons are not recorded in history. Ties keep the order of
        ``job_ids``.
        """
        profile = await self._get_profile(profile_id)
        comparisons = []
        for job_id in job_ids:
            job = await self._get_job(job_id)
            comparisons.append(
                JobComparison(job_id=job.id, result=self.scorer.score(profile, job, today=today))
            )
        return sorted(comparisons, key=lambda item: -item.result.overall_score)

    async def compare_profiles(
        self, profile_ids: list[str], job_id: str, today: date | None = None
    ) -> list[ProfileComparison]:
        """Score several profiles against one job, best match first."""
        job = await self._get_job(job_id)
        comparisons = []
        for profile_id in profile_ids:
            profile = await self._get_profile(profile_id)
            comparisons.append(
                ProfileComparison(
                    profile_id=profile.id,
                    result=self.scorer.score(profile, job, today=today),
                )
            )
        return sorted(comparisons, key=lambda item: -item.result.overall_score)

    async def _get_profile(self, profile_id: str) -> Profile:
        profile = await self.profiles.get(profile_id)
        if profile is None:
            raise MatchingError.not_found("Profile", profile_id)
        return profile

    async def _get_job(self, job_id: str) -> Job:
        job = await self.jobs.get(job_id)
        if job is None:
            raise MatchingError.not_found("Job", job_id)
        return job
