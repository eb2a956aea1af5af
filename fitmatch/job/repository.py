"""SQLite storage for saved jobs."""

import json

from fitmatch.job.models import Job
from fitmatch.utils.db import SQLiteRepository

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS jobs (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    payload TEXT NOT NULL,
    last_match_score REAL
);
CREATE INDEX IF NOT EXISTS idx_jobs_user ON jobs(user_id);
"""


class JobRepository(SQLiteRepository):
    """Async SQLite repository for jobs, keyed by job id."""

    SCHEMA_SQL = SCHEMA_SQL

    async def save(self, job: Job) -> None:
        """Insert or replace a job."""
        async with self._get_connection() as conn:
            await conn.execute(
                """
                INSERT OR REPLACE INTO jobs (id, user_id, payload, last_match_score)
                VALUES (?, ?, ?, ?)
                """,
                (
                    job.id,
                    job.user_id,
                    json.dumps(job.to_dict()),
                    job.last_match_score,
                ),
            )
            await conn.commit()

    async def get(self, job_id: str) -> Job | None:
        """Get a job by id, or None if it does not exist."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                "SELECT payload, last_match_score FROM jobs WHERE id = ?",
                (job_id,),
            )
            row = await cursor.fetchone()

        if row is None:
            return None

        data = json.loads(row["payload"])
        data["last_match_score"] = row["last_match_score"]
        return Job.from_dict(data)

    async def update_last_match_score(self, job_id: str, score: float) -> None:
        """Store the most recent overall match score for a job."""
        async with self._get_connection() as conn:
            await conn.execute(
                "UPDATE jobs SET last_match_score = ? WHERE id = ?",
                (score, job_id),
            )
            await conn.commit()

    async def list_for_user(self, user_id: str) -> list[Job]:
        """List all jobs saved by a user."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                "SELECT payload, last_match_score FROM jobs WHERE user_id = ? ORDER BY id",
                (user_id,),
            )
            rows = await cursor.fetchall()

        jobs: list[Job] = []
        for row in rows:
            data = json.loads(row["payload"])
            data["last_match_score"] = row["last_match_score"]
            jobs.append(Job.from_dict(data))
        return jobs
