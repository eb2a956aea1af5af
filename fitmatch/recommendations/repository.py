"""Database repository for recommendations."""

from datetime import UTC, datetime

import aiosqlite

from fitmatch.job.models import RequirementType
from fitmatch.recommendations.models import (
    Priority,
    Recommendation,
    RecommendationStatus,
    RecommendationType,
)
from fitmatch.utils.db import SQLiteRepository, parse_datetime

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS recommendations (
    id TEXT PRIMARY KEY,
    seq INTEGER NOT NULL,
    profile_id TEXT NOT NULL,
    job_id TEXT,
    type TEXT NOT NULL,
    priority TEXT NOT NULL,
    priority_rank INTEGER NOT NULL,
    related_requirement TEXT NOT NULL,
    requirement_type TEXT NOT NULL,
    weight REAL NOT NULL,
    title TEXT NOT NULL,
    description TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'pending',
    rejection_reason TEXT,
    created_at TEXT NOT NULL,
    resolved_at TEXT
);
CREATE INDEX IF NOT EXISTS idx_recommendations_profile ON recommendations(profile_id);
CREATE INDEX IF NOT EXISTS idx_recommendations_job ON recommendations(job_id);
CREATE INDEX IF NOT EXISTS idx_recommendations_status ON recommendations(status);
"""

# Priority first, then weight, then insertion order.
_ORDER_BY = "ORDER BY priority_rank DESC, weight DESC, seq ASC"


class RecommendationRepository(SQLiteRepository):
    """Async SQLite repository for recommendations."""

    SCHEMA_SQL = SCHEMA_SQL

    async def insert_many(self, recommendations: list[Recommendation]) -> None:
        """Store new recommendations, preserving their order as ``seq``."""
        if not recommendations:
            return

        async with self._get_connection() as conn:
            cursor = await conn.execute("SELECT COALESCE(MAX(seq), 0) FROM recommendations")
            row = await cursor.fetchone()
            next_seq = int(row[0]) + 1

            await conn.executemany(
                """
                INSERT INTO recommendations (
                    id, seq, profile_id, job_id, type, priority, priority_rank,
                    related_requirement, requirement_type, weight, title,
                    description, status, rejection_reason, created_at, resolved_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        rec.id,
                        next_seq + offset,
                        rec.profile_id,
                        rec.job_id,
                        rec.type.value,
                        rec.priority.value,
                        rec.priority.rank,
                        rec.related_requirement,
                        rec.requirement_type.value,
                        rec.weight,
                        rec.title,
                        rec.description,
                        rec.status.value,
                        rec.rejection_reason,
                        rec.created_at.isoformat(),
                        rec.resolved_at.isoformat() if rec.resolved_at else None,
                    )
                    for offset, rec in enumerate(recommendations)
                ],
            )
            await conn.commit()

    async def get(self, recommendation_id: str) -> Recommendation | None:
        """Get a recommendation by ID."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM recommendations WHERE id = ?", (recommendation_id,)
            )
            row = await cursor.fetchone()

        if row is None:
            return None
        return self._row_to_recommendation(row)

    async def find_by_profile(self, profile_id: str) -> list[Recommendation]:
        return await self._find("profile_id = ?", (profile_id,))

    async def find_by_profile_and_job(
        self, profile_id: str, job_id: str
    ) -> list[Recommendation]:
        return await self._find("profile_id = ? AND job_id = ?", (profile_id, job_id))

    async def find_by_job(self, job_id: str) -> list[Recommendation]:
        return await self._find("job_id = ?", (job_id,))

    async def find_by_type(
        self, profile_id: str, rec_type: RecommendationType
    ) -> list[Recommendation]:
        return await self._find("profile_id = ? AND type = ?", (profile_id, rec_type.value))

    async def find_by_priority(
        self, profile_id: str, priority: Priority
    ) -> list[Recommendation]:
        return await self._find(
            "profile_id = ? AND priority = ?", (profile_id, priority.value)
        )

    async def mark_completed(self, recommendation: Recommendation) -> bool:
        """Persist a completed recommendation if its row is still pending.

        Returns:
            True if the row was updated, False if it was not pending anymore.
        """
        if recommendation.status != RecommendationStatus.COMPLETED:
            raise ValueError("mark_completed expects a completed recommendation")
        return await self._transition(recommendation)

    async def mark_rejected(self, recommendation: Recommendation) -> bool:
        """Persist a rejected recommendation if its row is still pending."""
        if recommendation.status != RecommendationStatus.REJECTED:
            raise ValueError("mark_rejected expects a rejected recommendation")
        return await self._transition(recommendation)

    async def _transition(self, recommendation: Recommendation) -> bool:
        # Conditional on pending so two concurrent transitions cannot both win.
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                """
                UPDATE recommendations
                SET status = ?, rejection_reason = ?, resolved_at = ?
                WHERE id = ? AND status = ?
                """,
                (
                    recommendation.status.value,
                    recommendation.rejection_reason,
                    recommendation.resolved_at.isoformat()
                    if recommendation.resolved_at
                    else None,
                    recommendation.id,
                    RecommendationStatus.PENDING.value,
                ),
            )
            await conn.commit()
            return cursor.rowcount > 0

    async def _find(self, where: str, params: tuple) -> list[Recommendation]:
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM recommendations WHERE {where} {_ORDER_BY}", params
            )
            rows = await cursor.fetchall()

        return [self._row_to_recommendation(row) for row in rows]

    def _row_to_recommendation(self, row: aiosqlite.Row) -> Recommendation:
        """Convert a database row to a Recommendation."""
        return Recommendation(
            id=row["id"],
            profile_id=row["profile_id"],
            job_id=row["job_id"],
            type=RecommendationType(row["type"]),
            priority=Priority(row["priority"]),
            related_requirement=row["related_requirement"],
            requirement_type=RequirementType(row["requirement_type"]),
            weight=float(row["weight"]),
            title=row["title"],
            description=row["description"],
            status=RecommendationStatus(row["status"]),
            rejection_reason=row["rejection_reason"],
            created_at=parse_datetime(row["created_at"]) or datetime.now(UTC),
            resolved_at=parse_datetime(row["resolved_at"]),
        )
