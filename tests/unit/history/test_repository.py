"""Tests for the MatchHistoryRepository database layer."""

from datetime import UTC, datetime

import pytest


def _entry(profile_version=1, score=0.5, job_id="job-1", created_at=None):
    from fitmatch.history.models import MatchHistory
    from fitmatch.matching.models import MatchResult

    return MatchHistory(
        profile_id="profile-1",
        job_id=job_id,
        profile_version=profile_version,
        match_result=MatchResult(overall_score=score, profile_version=profile_version),
        created_at=created_at or datetime.now(UTC),
    )


class TestMatchHistoryRepository:
    """Test history storage."""

    @pytest.mark.asyncio
    async def test_creates_table_with_composite_key(self, tmp_path):
        """The table is keyed by profile, job and version."""
        from fitmatch.history.repository import MatchHistoryRepository

        repo = MatchHistoryRepository(tmp_path / "fitmatch.db")
        await repo.initialize()

        async with repo._get_connection() as conn:
            cursor = await conn.execute("PRAGMA table_info(match_history)")
            columns = await cursor.fetchall()

        key_columns = sorted((col[5], col[1]) for col in columns if col[5])
        assert [name for _, name in key_columns] == [
            "profile_id",
            "job_id",
            "profile_version",
        ]

        await repo.close()

    @pytest.mark.asyncio
    async def test_upsert_replaces_same_version(self, tmp_path):
        """Writing the same key twice keeps one row with the latest result."""
        from fitmatch.history.repository import MatchHistoryRepository

        repo = MatchHistoryRepository(tmp_path / "fitmatch.db")
        await repo.initialize()

        await repo.upsert(_entry(score=0.4))
        await repo.upsert(_entry(score=0.6))

        rows = await repo.find_by_pair("profile-1", "job-1")
        assert len(rows) == 1
        assert rows[0].match_result.overall_score == 0.6

        await repo.close()

    @pytest.mark.asyncio
    async def test_find_by_pair_orders_by_version(self, tmp_path):
        """Rows come back in ascending version order regardless of write order."""
        from fitmatch.history.repository import MatchHistoryRepository

        repo = MatchHistoryRepository(tmp_path / "fitmatch.db")
        await repo.initialize()

        for version in (3, 1, 2):
            await repo.upsert(_entry(profile_version=version, score=version / 10))

        rows = await repo.find_by_pair("profile-1", "job-1")
        assert [row.profile_version for row in rows] == [1, 2, 3]

        latest = await repo.find_latest("profile-1", "job-1")
        assert latest.profile_version == 3
        assert await repo.find_latest("profile-1", "other-job") is None

        await repo.close()

    @pytest.mark.asyncio
    async def test_find_by_profile_and_job(self, tmp_path):
        """Profile and job views list rows newest first."""
        from fitmatch.history.repository import MatchHistoryRepository

        repo = MatchHistoryRepository(tmp_path / "fitmatch.db")
        await repo.initialize()

        await repo.upsert(_entry(job_id="job-1", created_at=datetime(2024, 1, 1, tzinfo=UTC)))
        await repo.upsert(_entry(job_id="job-2", created_at=datetime(2024, 2, 1, tzinfo=UTC)))

        by_profile = await repo.find_by_profile("profile-1")
        assert [row.job_id for row in by_profile] == ["job-2", "job-1"]

        by_job = await repo.find_by_job("job-1")
        assert len(by_job) == 1
        assert by_job[0].created_at == datetime(2024, 1, 1, tzinfo=UTC)

        await repo.close()

    @pytest.mark.asyncio
    async def test_match_result_survives_storage(self, tmp_path):
        """The stored result is restored with its category scores."""
        from fitmatch.history.models import MatchHistory
        from fitmatch.history.repository import MatchHistoryRepository
        from fitmatch.job.models import RequirementType
        from fitmatch.matching.models import MatchResult

        repo = MatchHistoryRepository(tmp_path / "fitmatch.db")
        await repo.initialize()

        result = MatchResult(
            overall_score=0.7,
            category_scores={RequirementType.SKILL: 0.7},
            mandatory_miss_count=1,
            profile_version=2,
        )
        await repo.upsert(
            MatchHistory(
                profile_id="profile-1", job_id="job-1", profile_version=2, match_result=result
            )
        )

        stored = await repo.find_latest("profile-1", "job-1")
        assert stored.match_result == result

        await repo.close()
