"""Storage interfaces the services depend on.

Any object with a matching async ``get`` works; the SQLite repositories in
``fitmatch.profile`` and ``fitmatch.job`` satisfy these structurally.
"""

from typing import Protocol, runtime_checkable

from fitmatch.job.models import Job
from fitmatch.profile.models import Profile


@runtime_checkable
class ProfileSource(Protocol):
    async def get(self, profile_id: str) -> Profile | None:
        """Return the latest version of a profile, or None."""
        ...


@runtime_checkable
class JobSource(Protocol):
    async def get(self, job_id: str) -> Job | None:
        """Return a job, or None."""
        ...


@runtime_checkable
class JobScoreSink(Protocol):
    """Optional capability: remember the last overall score of a job."""

    async def update_last_match_score(self, job_id: str, score: float) -> None: ...
