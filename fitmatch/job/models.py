"""Data models for job postings and their requirements."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class RequirementType(str, Enum):
    """Category of a job requirement."""

    SKILL = "skill"
    EXPERIENCE = "experience"
    EDUCATION = "education"
    SOFT_SKILL = "soft_skill"
    OTHER = "other"


class ImportanceLevel(str, Enum):
    """How strongly a job posting asks for a requirement."""

    MANDATORY = "mandatory"
    PREFERRED = "preferred"
    NICE_TO_HAVE = "nice_to_have"


class JobRequirement(BaseModel):
    """A single requirement extracted from a job posting.

    ``type`` and ``importance`` may be left unset by the extractor; the
    requirement classifier fills them in before scoring. ``mandatory`` always
    mirrors ``importance == MANDATORY`` once importance is known.
    """

    text: str = Field(..., min_length=1, description="Requirement text")
    context: str = Field(
        default="",
        description="Sentence or bullet the requirement was extracted from",
    )
    type: RequirementType | None = Field(default=None, description="Requirement type")
    importance: ImportanceLevel | None = Field(
        default=None, description="Importance level"
    )
    mandatory: bool | None = Field(
        default=None, description="True iff importance is mandatory"
    )

    @model_validator(mode="after")
    def sync_mandatory_flag(self) -> JobRequirement:
        if self.importance is not None:
            self.mandatory = self.importance == ImportanceLevel.MANDATORY
        return self

    @property
    def is_classified(self) -> bool:
        return self.type is not None and self.importance is not None


class Job(BaseModel):
    """A saved job posting with structured requirements."""

    id: str = Field(..., min_length=1, description="Job identifier")
    user_id: str = Field(..., min_length=1, description="Owning user identifier")
    title: str = Field(default="", description="Job title")
    company: str = Field(default="", description="Company name")

    requirements: list[JobRequirement] = Field(
        default_factory=list, description="Structured requirements"
    )
    responsibilities: list[str] = Field(
        default_factory=list, description="Key responsibilities"
    )
    benefits: list[str] = Field(default_factory=list, description="Benefits")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")

    last_match_score: float | None = Field(
        default=None, ge=0.0, le=1.0, description="Most recent overall match score"
    )

    def to_dict(self) -> dict:
        """Serialize to a dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict) -> Job:
        """Deserialize from a dictionary."""
        return cls.model_validate(data)
