"""Tests for the RecommendationService."""

from unittest.mock import AsyncMock

import pytest


@pytest.fixture
async def service(tmp_path, python_expert, make_job, matching_config):
    from fitmatch.matching.analyzer import DetailedAnalyzer
    from fitmatch.matching.scorer import MatchScorer
    from fitmatch.recommendations.repository import RecommendationRepository
    from fitmatch.recommendations.service import RecommendationService

    job = make_job(["Python required", "Go required", "Kafka", "Docker is a plus"])
    profiles = AsyncMock()
    profiles.get.side_effect = lambda pid: python_expert if pid == python_expert.id else None
    jobs = AsyncMock()
    jobs.get.side_effect = lambda jid: job if jid == job.id else None

    repo = RecommendationRepository(tmp_path / "fitmatch.db")
    await repo.initialize()
    yield RecommendationService(
        repo,
        profiles=profiles,
        jobs=jobs,
        analyzer=DetailedAnalyzer(MatchScorer(matching_config)),
    )
    await repo.close()


class TestGenerateRecommendations:
    """Test generation through the service."""

    @pytest.mark.asyncio
    async def test_generate_persists_prioritized(self, service, today):
        """Generated recommendations are prioritized and stored."""
        from fitmatch.recommendations.models import Priority

        generated = await service.generate_recommendations("profile-1", "job-1", today=today)

        assert [rec.related_requirement for rec in generated] == [
            "Go required",
            "Kafka",
            "Docker is a plus",
        ]
        assert generated[0].priority == Priority.HIGH

        stored = await service.get_recommendations_for_profile("profile-1")
        assert [rec.id for rec in stored] == [rec.id for rec in generated]

        by_pair = await service.get_recommendations_for_profile_and_job("profile-1", "job-1")
        assert len(by_pair) == 3

    @pytest.mark.asyncio
    async def test_generate_with_options(self, service, today):
        """Request options are applied."""
        from fitmatch.recommendations.models import (
            GenerateRecommendationsRequest,
            GenerationOptions,
        )

        generated = await service.generate_recommendations_with_options(
            GenerateRecommendationsRequest(
                profile_id="profile-1",
                job_id="job-1",
                options=GenerationOptions(max_recommendations=1),
            ),
            today=today,
        )

        assert [rec.related_requirement for rec in generated] == ["Go required"]

    @pytest.mark.asyncio
    async def test_unknown_profile_or_job(self, service):
        """Missing profiles and jobs are ENTITY_NOT_FOUND."""
        from fitmatch.errors import ErrorCode, MatchingError

        with pytest.raises(MatchingError) as exc_info:
            await service.generate_recommendations("missing", "job-1")
        assert exc_info.value.code == ErrorCode.ENTITY_NOT_FOUND

        with pytest.raises(MatchingError) as exc_info:
            await service.generate_recommendations("profile-1", "missing")
        assert exc_info.value.code == ErrorCode.ENTITY_NOT_FOUND

    @pytest.mark.asyncio
    async def test_prioritize_recommendations(self, service):
        """The service exposes the prioritization order."""
        from fitmatch.recommendations.models import Recommendation

        low = Recommendation(
            profile_id="p", type="add_skill", priority="low", related_requirement="a"
        )
        high = Recommendation(
            profile_id="p", type="add_skill", priority="high", related_requirement="b"
        )

        assert service.prioritize_recommendations([low, high]) == [high, low]


class TestLifecycle:
    """Test mark_as_completed / mark_as_rejected."""

    @pytest.mark.asyncio
    async def test_complete_then_reject_fails(self, service, today):
        """Completed recommendations cannot be rejected."""
        from fitmatch.errors import ErrorCode, MatchingError
        from fitmatch.recommendations.models import RecommendationStatus

        generated = await service.generate_recommendations("profile-1", "job-1", today=today)
        target = generated[0]

        completed = await service.mark_as_completed(target.id)
        assert completed.status == RecommendationStatus.COMPLETED

        with pytest.raises(MatchingError) as exc_info:
            await service.mark_as_rejected(target.id, "Changed my mind")
        assert exc_info.value.code == ErrorCode.INVALID_OPERATION

        with pytest.raises(MatchingError):
            await service.mark_as_completed(target.id)

        stored = await service.repository.get(target.id)
        assert stored.status == RecommendationStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_reject_with_reason(self, service, today):
        """Rejecting stores the reason."""
        from fitmatch.recommendations.models import RecommendationStatus

        generated = await service.generate_recommendations("profile-1", "job-1", today=today)

        rejected = await service.mark_as_rejected(generated[1].id, "Not interested in Kafka")

        stored = await service.repository.get(generated[1].id)
        assert rejected.status == RecommendationStatus.REJECTED
        assert stored.rejection_reason == "Not interested in Kafka"

    @pytest.mark.asyncio
    async def test_reject_without_reason(self, service, today):
        """A blank reason is an invalid operation and leaves the row pending."""
        from fitmatch.errors import ErrorCode, MatchingError
        from fitmatch.recommendations.models import RecommendationStatus

        generated = await service.generate_recommendations("profile-1", "job-1", today=today)

        with pytest.raises(MatchingError) as exc_info:
            await service.mark_as_rejected(generated[0].id, "")
        assert exc_info.value.code == ErrorCode.INVALID_OPERATION

        stored = await service.repository.get(generated[0].id)
        assert stored.status == RecommendationStatus.PENDING

    @pytest.mark.asyncio
    async def test_unknown_recommendation(self, service):
        """Unknown ids are ENTITY_NOT_FOUND."""
        from fitmatch.errors import ErrorCode, MatchingError

        with pytest.raises(MatchingError) as exc_info:
            await service.mark_as_completed("missing")
        assert exc_info.value.code == ErrorCode.ENTITY_NOT_FOUND
