"""Tests for the RecommendationRepository database layer."""

import pytest


def _rec(requirement, priority="medium", weight=2.0, job_id="job-1", rec_type="add_skill"):
    from fitmatch.recommendations.models import Recommendation

    return Recommendation(
        profile_id="profile-1",
        job_id=job_id,
        type=rec_type,
        priority=priority,
        related_requirement=requirement,
        weight=weight,
    )


@pytest.fixture
async def repo(tmp_path):
    from fitmatch.recommendations.repository import RecommendationRepository

    repository = RecommendationRepository(tmp_path / "fitmatch.db")
    await repository.initialize()
    yield repository
    await repository.close()


class TestRecommendationRepository:
    """Test recommendation storage."""

    @pytest.mark.asyncio
    async def test_insert_and_get(self, repo):
        """Stored recommendations are read back unchanged."""
        recommendation = _rec("Go required", priority="high", weight=3.0)
        await repo.insert_many([recommendation])

        assert await repo.get(recommendation.id) == recommendation
        assert await repo.get("missing") is None

    @pytest.mark.asyncio
    async def test_find_orders_by_priority_weight_then_insertion(self, repo):
        """Queries return prioritized order with insertion order as tie-break."""
        await repo.insert_many(
            [
                _rec("low", priority="low", weight=1.0),
                _rec("medium-first", priority="medium", weight=2.0),
                _rec("high", priority="high", weight=3.0),
            ]
        )
        await repo.insert_many([_rec("medium-second", priority="medium", weight=2.0)])

        found = await repo.find_by_profile("profile-1")

        assert [rec.related_requirement for rec in found] == [
            "high",
            "medium-first",
            "medium-second",
            "low",
        ]

    @pytest.mark.asyncio
    async def test_filters(self, repo):
        """Recommendations can be filtered by job, type and priority."""
        from fitmatch.recommendations.models import Priority, RecommendationType

        await repo.insert_many(
            [
                _rec("a", job_id="job-1", rec_type="add_skill", priority="high"),
                _rec("b", job_id="job-2", rec_type="improve_soft_skills"),
            ]
        )

        assert [r.related_requirement for r in await repo.find_by_job("job-2")] == ["b"]
        assert [
            r.related_requirement for r in await repo.find_by_profile_and_job("profile-1", "job-1")
        ] == ["a"]
        assert [
            r.related_requirement
            for r in await repo.find_by_type("profile-1", RecommendationType.IMPROVE_SOFT_SKILLS)
        ] == ["b"]
        assert [
            r.related_requirement
            for r in await repo.find_by_priority("profile-1", Priority.HIGH)
        ] == ["a"]

    @pytest.mark.asyncio
    async def test_transition_only_applies_to_pending_rows(self, repo):
        """A second transition of the same row is refused."""
        recommendation = _rec("Go required")
        await repo.insert_many([recommendation])

        assert await repo.mark_completed(recommendation.complete()) is True
        assert await repo.mark_rejected(recommendation.reject("Too late")) is False

        stored = await repo.get(recommendation.id)
        assert stored.status.value == "completed"
        assert stored.rejection_reason is None

    @pytest.mark.asyncio
    async def test_mark_requires_matching_status(self, repo):
        """mark_completed only accepts completed recommendations."""
        recommendation = _rec("Go required")
        await repo.insert_many([recommendation])

        with pytest.raises(ValueError):
            await repo.mark_completed(recommendation)
