"""Database repository for the Match History Tracker.

Rows are keyed by ``(profile_id, job_id, profile_version)`` and written with
``INSERT OR REPLACE``, so re-scoring an unchanged profile version overwrites
its row instead of adding a second trend point.
"""

import json
from datetime import UTC, datetime

import aiosqlite

from fitmatch.history.models import MatchHistory
from fitmatch.matching.models import MatchResult
from fitmatch.utils.db import SQLiteRepository, parse_datetime

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS match_history (
    profile_id TEXT NOT NULL,
    job_id TEXT NOT NULL,
    profile_version INTEGER NOT NULL,
    overall_score REAL NOT NULL,
    match_result TEXT NOT NULL,
    created_at TEXT NOT NULL,
    PRIMARY KEY (profile_id, job_id, profile_version)
);
CREATE INDEX IF NOT EXISTS idx_match_history_job ON match_history(job_id);
CREATE INDEX IF NOT EXISTS idx_match_history_created ON match_history(created_at);
"""


class MatchHistoryRepository(SQLiteRepository):
    """Async SQLite repository for match history rows."""

    SCHEMA_SQL = SCHEMA_SQL

    async def upsert(self, entry: MatchHistory) -> None:
        """Insert a history row, replacing any row with the same key."""
        async with self._get_connection() as conn:
            await conn.execute(
                """
                INSERT OR REPLACE INTO match_history (
                    profile_id, job_id, profile_version, overall_score,
                    match_result, created_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.profile_id,
                    entry.job_id,
                    entry.profile_version,
                    entry.match_result.overall_score,
                    json.dumps(entry.match_result.to_dict()),
                    entry.created_at.isoformat(),
                ),
            )
            await conn.commit()

    async def find_by_pair(self, profile_id: str, job_id: str) -> list[MatchHistory]:
        """All rows for a profile/job pair, ordered by profile version."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM match_history
                WHERE profile_id = ? AND job_id = ?
                ORDER BY profile_version ASC
                """,
                (profile_id, job_id),
            )
            rows = await cursor.fetchall()

        return [self._row_to_entry(row) for row in rows]

    async def find_latest(self, profile_id: str, job_id: str) -> MatchHistory | None:
        """The row for the highest scored profile version of a pair."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM match_history
                WHERE profile_id = ? AND job_id = ?
                ORDER BY profile_version DESC
                LIMIT 1
                """,
                (profile_id, job_id),
            )
            row = await cursor.fetchone()

        if row is None:
            return None
        return self._row_to_entry(row)

    async def find_by_profile(self, profile_id: str) -> list[MatchHistory]:
        """All rows for a profile, newest first."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM match_history
                WHERE profile_id = ?
                ORDER BY created_at DESC, job_id ASC, profile_version DESC
                """,
                (profile_id,),
            )
            rows = await cursor.fetchall()

        return [self._row_to_entry(row) for row in rows]

    async def find_by_job(self, job_id: str) -> list[MatchHistory]:
        """All rows for a job, newest first."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM match_history
                WHERE job_id = ?
                ORDER BY created_at DESC, profile_id ASC, profile_version DESC
                """,
                (job_id,),
            )
            rows = await cursor.fetchall()

        return [self._row_to_entry(row) for row in rows]

    def _row_to_entry(self, row: aiosqlite.Row) -> MatchHistory:
        """Convert a database row to a MatchHistory entry."""
        return MatchHistory(
            profile_id=row["profile_id"],
            job_id=row["job_id"],
            profile_version=int(row["profile_version"]),
            match_result=MatchResult.from_dict(json.loads(row["match_result"])),
            created_at=parse_datetime(row["created_at"]) or datetime.now(UTC),
        )
