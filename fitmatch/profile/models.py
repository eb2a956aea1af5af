"""Data models for candidate profiles."""

from __future__ import annotations

from datetime import UTC, date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ProficiencyLevel(str, Enum):
    """Self-reported or extracted proficiency for a skill."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class Skill(BaseModel):
    """A named skill with a proficiency level."""

    name: str = Field(..., min_length=1, description="Skill or technology name")
    proficiency_level: ProficiencyLevel = Field(
        default=ProficiencyLevel.INTERMEDIATE, description="Proficiency level"
    )
    category: str | None = Field(
        default=None, description="Skill category (e.g. language, framework)"
    )


class WorkExperience(BaseModel):
    """Work experience entry for a profile."""

    title: str = Field(..., description="Job title")
    company: str = Field(..., description="Company name")
    start_date: date = Field(..., description="Start date")
    end_date: date | None = Field(
        default=None, description="End date (None for the current role)"
    )
    description: str = Field(default="", description="Role description")
    skills_used: list[str] = Field(
        default_factory=list, description="Skills used in this role"
    )


class Education(BaseModel):
    """Education entry for a profile."""

    institution: str = Field(..., description="Institution name")
    degree: str = Field(..., description="Degree level")
    field: str = Field(default="", description="Field of study")
    graduation_year: int | None = Field(default=None, description="Graduation year")


class Language(BaseModel):
    """Spoken language entry."""

    name: str = Field(..., description="Language name")
    level: str | None = Field(default=None, description="Language level (e.g. B2)")


class Certification(BaseModel):
    """Certification / training entry."""

    name: str = Field(..., description="Certification or training name")
    issuer: str | None = Field(default=None, description="Issuing organization")
    date_awarded: date | None = Field(default=None, description="Date awarded")


class Profile(BaseModel):
    """A single immutable version of a candidate profile."""

    id: str = Field(..., min_length=1, description="Profile identifier")
    user_id: str = Field(..., min_length=1, description="Owning user identifier")
    version: int = Field(default=1, ge=1, description="Monotonic profile version")

    title: str = Field(default="", description="Current or target job title")
    summary: str = Field(default="", description="Professional summary")

    skills: list[Skill] = Field(default_factory=list, description="Skills")
    work_experience: list[WorkExperience] = Field(
        default_factory=list, description="Past and current positions"
    )
    education: list[Education] = Field(
        default_factory=list, description="Education history"
    )
    languages: list[Language] = Field(default_factory=list, description="Languages")
    certifications: list[Certification] = Field(
        default_factory=list, description="Certifications and trainings"
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When this version was created",
    )

    model_config = ConfigDict(frozen=True)

    def has_features(self) -> bool:
        """Return True if the profile carries anything the comparator can use."""
        return bool(
            self.skills
            or self.work_experience
            or self.education
            or self.certifications
            or self.summary.strip()
            or self.title.strip()
        )

    def next_version(self, **updates) -> Profile:
        """Return a new snapshot with ``version + 1`` and the given field updates."""
        data = self.model_dump()
        data.update(updates)
        data["version"] = self.version + 1
        data["updated_at"] = datetime.now(UTC)
        return Profile.model_validate(data)

    def to_dict(self) -> dict:
        """Serialize to a dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict) -> Profile:
        """Deserialize from a dictionary."""
        return cls.model_validate(data)
