"""Append-only SQLite storage for profile version snapshots.

Every profile version is stored as its own immutable row keyed by
``(profile_id, version)``. Superseded versions are never updated or
deleted; the latest version is simply the row with the highest number.
"""

import json
import sqlite3
from datetime import datetime

from fitmatch.errors import MatchingError
from fitmatch.profile.models import Profile
from fitmatch.utils.db import SQLiteRepository, parse_datetime

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS profile_versions (
    profile_id TEXT NOT NULL,
    version INTEGER NOT NULL,
    user_id TEXT NOT NULL,
    payload TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    PRIMARY KEY (profile_id, version)
);
CREATE INDEX IF NOT EXISTS idx_profile_versions_user ON profile_versions(user_id);
"""


class ProfileRepository(SQLiteRepository):
    """Async SQLite repository for versioned profile snapshots."""

    SCHEMA_SQL = SCHEMA_SQL

    async def save_version(self, profile: Profile) -> None:
        """Append a new profile version.

        Raises:
            MatchingError: VALIDATION_ERROR if ``profile.version`` is not
                greater than the latest stored version.
        """
        latest = await self.latest_version(profile.id)
        if latest is not None and profile.version <= latest:
            raise MatchingError.validation(
                f"Profile '{profile.id}' version {profile.version} must be "
                f"greater than the latest stored version {latest}"
            )

        async with self._get_connection() as conn:
            try:
                await conn.execute(
                    """
                    INSERT INTO profile_versions (
                        profile_id, version, user_id, payload, updated_at
                    ) VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        profile.id,
                        profile.version,
                        profile.user_id,
                        json.dumps(profile.to_dict()),
                        profile.updated_at.isoformat(),
                    ),
                )
            except sqlite3.IntegrityError as e:
                raise MatchingError.validation(
                    f"Profile '{profile.id}' version {profile.version} already exists"
                ) from e
            await conn.commit()

    async def latest_version(self, profile_id: str) -> int | None:
        """Return the highest stored version number for a profile."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                "SELECT MAX(version) AS version FROM profile_versions WHERE profile_id = ?",
                (profile_id,),
            )
            row = await cursor.fetchone()

        if row is None or row["version"] is None:
            return None
        return int(row["version"])

    async def get(self, profile_id: str) -> Profile | None:
        """Get the latest version of a profile."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT payload FROM profile_versions
                WHERE profile_id = ?
                ORDER BY version DESC
                LIMIT 1
                """,
                (profile_id,),
            )
            row = await cursor.fetchone()

        if row is None:
            return None
        return Profile.from_dict(json.loads(row["payload"]))

    async def get_version(self, profile_id: str, version: int) -> Profile | None:
        """Get a specific historical version of a profile."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                "SELECT payload FROM profile_versions WHERE profile_id = ? AND version = ?",
                (profile_id, version),
            )
            row = await cursor.fetchone()

        if row is None:
            return None
        return Profile.from_dict(json.loads(row["payload"]))

    async def list_versions(self, profile_id: str) -> list[tuple[int, datetime]]:
        """Return ``(version, updated_at)`` pairs, oldest first."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT version, updated_at FROM profile_versions
                WHERE profile_id = ?
                ORDER BY version ASC
                """,
                (profile_id,),
            )
            rows = await cursor.fetchall()

        return [(int(row["version"]), parse_datetime(row["updated_at"])) for row in rows]
