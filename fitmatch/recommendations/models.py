"""Data models for profile improvement recommendations."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field

from fitmatch.errors import MatchingError
from fitmatch.job.models import RequirementType


class RecommendationType(str, Enum):
    """Kind of action a recommendation asks for."""

    ADD_SKILL = "add_skill"
    REWORD_EXPERIENCE = "reword_experience"
    EMPHASIZE_ROLE = "emphasize_role"
    ADD_CERTIFICATION = "add_certification"
    IMPROVE_SOFT_SKILLS = "improve_soft_skills"
    GENERIC_IMPROVEMENT = "generic_improvement"


class Priority(str, Enum):
    """Recommendation priority."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Higher rank sorts first."""
        return {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}[self]


class RecommendationStatus(str, Enum):
    """Lifecycle status of a recommendation."""

    PENDING = "pending"
    COMPLETED = "completed"
    REJECTED = "rejected"


class Recommendation(BaseModel):
    """A suggested profile improvement tied to one job requirement.

    Created in ``pending``; moves to ``completed`` or ``rejected`` only via
    :meth:`complete` / :meth:`reject`. Terminal states are final.
    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    profile_id: str = Field(..., min_length=1)
    job_id: str | None = Field(default=None)
    type: RecommendationType
    priority: Priority
    related_requirement: str = Field(..., description="Requirement text")
    requirement_type: RequirementType = Field(default=RequirementType.OTHER)
    weight: float = Field(default=1.0, ge=0.0, description="Requirement weight")
    title: str = Field(default="")
    description: str = Field(default="")
    status: RecommendationStatus = Field(default=RecommendationStatus.PENDING)
    rejection_reason: str | None = Field(default=None)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    resolved_at: datetime | None = Field(default=None)

    @property
    def is_terminal(self) -> bool:
        return self.status != RecommendationStatus.PENDING

    def _ensure_pending(self, action: str) -> None:
        if self.is_terminal:
            raise MatchingError.invalid_operation(
                f"Cannot {action} recommendation '{self.id}': "
                f"it is already {self.status.value}"
            )

    def complete(self, at: datetime | None = None) -> Recommendation:
        """Return the completed copy of this pending recommendation.

        Raises:
            MatchingError: INVALID_OPERATION if already completed or rejected.
        """
        self._ensure_pending("complete")
        return self.model_copy(
            update={
                "status": RecommendationStatus.COMPLETED,
                "resolved_at": at or datetime.now(UTC),
            }
        )

    def reject(self, reason: str, at: datetime | None = None) -> Recommendation:
        """Return the rejected copy of this pending recommendation.

        Raises:
            MatchingError: INVALID_OPERATION if the reason is blank or the
                recommendation is already completed or rejected.
        """
        if not reason or not reason.strip():
            raise MatchingError.invalid_operation(
                "A non-empty reason is required to reject a recommendation"
            )
        self._ensure_pending("reject")
        return self.model_copy(
            update={
                "status": RecommendationStatus.REJECTED,
                "rejection_reason": reason.strip(),
                "resolved_at": at or datetime.now(UTC),
            }
        )

    def to_dict(self) -> dict:
        """Serialize to a dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict) -> Recommendation:
        """Deserialize from a dictionary."""
        return cls.model_validate(data)


class GenerationOptions(BaseModel):
    """Optional filters applied when generating recommendations."""

    max_recommendations: int | None = Field(default=None, ge=1)
    types: list[RecommendationType] | None = Field(default=None)
    min_priority: Priority | None = Field(default=None)


class GenerateRecommendationsRequest(BaseModel):
    """Request to generate recommendations for a profile/job pair."""

    profile_id: str = Field(..., min_length=1)
    job_id: str = Field(..., min_length=1)
    options: GenerationOptions = Field(default_factory=GenerationOptions)
