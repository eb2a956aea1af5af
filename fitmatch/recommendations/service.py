"""Recommendation service: generation, persistence and lifecycle."""

import logging
from datetime import date

from fitmatch.collaborators import JobSource, ProfileSource
from fitmatch.errors import MatchingError
from fitmatch.job.models import Job
from fitmatch.matching.analyzer import DetailedAnalyzer
from fitmatch.profile.models import Profile
from fitmatch.recommendations.generator import (
    RecommendationGenerator,
    prioritize_recommendations,
)
from fitmatch.recommendations.models import (
    GenerateRecommendationsRequest,
    GenerationOptions,
    Recommendation,
)
from fitmatch.recommendations.repository import RecommendationRepository

logger = logging.getLogger(__name__)


class RecommendationService:
    """Business logic for profile improvement recommendations."""

    def __init__(
        self,
        repository: RecommendationRepository,
        profiles: ProfileSource,
        jobs: JobSource,
        analyzer: DetailedAnalyzer | None = None,
        generator: RecommendationGenerator | None = None,
    ):
        """Initialize the service.

        Args:
            repository: Storage for generated recommendations.
            profiles: Resolves profile ids to their latest version.
            jobs: Resolves job ids to jobs.
            analyzer: Detailed analyzer; a default one is built if omitted.
            generator: Recommendation generator sharing the analyzer's config
                if omitted.
        """
        self.repository = repository
        self.profiles = profiles
        self.jobs = jobs
        self.analyzer = analyzer or DetailedAnalyzer()
        self.generator = generator or RecommendationGenerator(self.analyzer.scorer.config)

    async def generate_recommendations(
        self, profile_id: str, job_id: str, today: date | None = None
    ) -> list[Recommendation]:
        """Analyze a profile against a job and store prioritized recommendations.

        Raises:
            MatchingError: ENTITY_NOT_FOUND if the profile or job is missing.
        """
        return await self.generate_recommendations_with_options(
            GenerateRecommendationsRequest(profile_id=profile_id, job_id=job_id),
            today=today,
        )

    async def generate_recommendations_with_options(
        self, request: GenerateRecommendationsRequest, today: date | None = None
    ) -> list[Recommendation]:
        """Like :meth:`generate_recommendations`, with type/priority/count filters."""
        profile, job = await self._resolve(request.profile_id, request.job_id)
        return await self.generate_for(profile, job, request.options, today=today)

    async def generate_for(
        self,
        profile: Profile,
        job: Job,
        options: GenerationOptions | None = None,
        today: date | None = None,
    ) -> list[Recommendation]:
        """Generate and store recommendations for already loaded records."""
        detailed = self.analyzer.analyze(profile, job, today=today)
        recommendations = prioritize_recommendations(
            self.generator.generate(detailed, profile.id, job.id, options)
        )
        await self.repository.insert_many(recommendations)
        logger.info(
            "Stored %d recommendation(s) for profile %s job %s",
            len(recommendations),
            profile.id,
            job.id,
        )
        return recommendations

    def prioritize_recommendations(
        self, recommendations: list[Recommendation]
    ) -> list[Recommendation]:
        return prioritize_recommendations(recommendations)

    async def get_recommendations_for_profile(self, profile_id: str) -> list[Recommendation]:
        return await self.repository.find_by_profile(profile_id)

    async def get_recommendations_for_profile_and_job(
        self, profile_id: str, job_id: str
    ) -> list[Recommendation]:
        return await self.repository.find_by_profile_and_job(profile_id, job_id)

    async def mark_as_completed(self, recommendation_id: str) -> Recommendation:
        """Move a pending recommendation to completed.

        Raises:
            MatchingError: ENTITY_NOT_FOUND if absent, INVALID_OPERATION if it
                is already completed or rejected.
        """
        recommendation = await self._require(recommendation_id)
        completed = recommendation.complete()
        if not await self.repository.mark_completed(completed):
            raise _lost_race(recommendation_id)
        logger.info("Recommendation %s completed", recommendation_id)
        return completed

    async def mark_as_rejected(self, recommendation_id: str, reason: str) -> Recommendation:
        """Move a pending recommendation to rejected with a reason.

        Raises:
            MatchingError: ENTITY_NOT_FOUND if absent, INVALID_OPERATION if the
                reason is blank or it is already completed or rejected.
        """
        recommendation = await self._require(recommendation_id)
        rejected = recommendation.reject(reason)
        if not await self.repository.mark_rejected(rejected):
            raise _lost_race(recommendation_id)
        logger.info("Recommendation %s rejected: %s", recommendation_id, rejected.rejection_reason)
        return rejected

    async def _require(self, recommendation_id: str) -> Recommendation:
        recommendation = await self.repository.get(recommendation_id)
        if recommendation is None:
            raise MatchingError.not_found("Recommendation", recommendation_id)
        return recommendation

    async def _resolve(self, profile_id: str, job_id: str) -> tuple[Profile, Job]:
        profile = await self.profiles.get(profile_id)
        if profile is None:
            raise MatchingError.not_found("Profile", profile_id)
        job = await self.jobs.get(job_id)
        if job is None:
            raise MatchingError.not_found("Job", job_id)
        return profile, job


def _lost_race(recommendation_id: str) -> MatchingError:
    return MatchingError.invalid_operation(
        f"Recommendation '{recommendation_id}' is no longer pending"
    )
