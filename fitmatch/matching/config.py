"""Configuration settings for the matching engine."""

from __future__ import annotations

from typing import Annotated

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fitmatch.job.models import ImportanceLevel
from fitmatch.profile.models import ProficiencyLevel


class MatchingConfig(BaseSettings):
    """Matching engine tunables.

    All settings have defaults and can be overridden via environment
    variables with the `MATCHING_` prefix or a .env file. The proficiency
    mapping, the mandatory-miss penalty and the fuzzy tolerance are product
    decisions rather than derived values; keep them here instead of at the
    call sites.
    """

    model_config = SettingsConfigDict(
        env_prefix="MATCHING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Thresholds
    satisfaction_threshold: Annotated[float, Field(ge=0.0, le=1.0)] = Field(
        default=0.6,
        description="Minimum comparator score for a requirement to count as satisfied",
    )
    strength_threshold: Annotated[float, Field(ge=0.0, le=1.0)] = Field(
        default=0.8,
        description="Minimum comparator score for a requirement to count as a strength",
    )
    partial_threshold: Annotated[float, Field(ge=0.0, le=1.0)] = Field(
        default=0.8,
        description="Scores in (0, partial_threshold) are partially met "
        "and still get a recommendation",
    )

    # Importance weights
    weight_mandatory: Annotated[float, Field(gt=0.0)] = Field(
        default=3.0, description="Weight of mandatory requirements"
    )
    weight_preferred: Annotated[float, Field(gt=0.0)] = Field(
        default=2.0, description="Weight of preferred requirements"
    )
    weight_nice_to_have: Annotated[float, Field(gt=0.0)] = Field(
        default=1.0, description="Weight of nice-to-have requirements"
    )

    mandatory_miss_penalty: Annotated[float, Field(ge=0.0, le=1.0)] = Field(
        default=0.1,
        description="Subtracted from the overall score per unsatisfied mandatory requirement",
    )

    # Skill matching
    skill_fuzzy_match: bool = Field(
        default=True,
        description="Enable fuzzy skill matching",
    )
    skill_fuzzy_threshold: Annotated[float, Field(ge=0.0, le=1.0)] = Field(
        default=0.85,
        description="Similarity threshold for fuzzy matching",
    )
    proficiency_scores: dict[ProficiencyLevel, float] = Field(
        default_factory=lambda: {
            ProficiencyLevel.BEGINNER: 0.4,
            ProficiencyLevel.INTERMEDIATE: 0.6,
            ProficiencyLevel.ADVANCED: 0.8,
            ProficiencyLevel.EXPERT: 1.0,
        },
        description="Comparator score for a matched skill at each proficiency level",
    )
    skills_used_score: Annotated[float, Field(ge=0.0, le=1.0)] = Field(
        default=0.4,
        description="Score for a skill only evidenced in work history skills_used",
    )

    @model_validator(mode="after")
    def validate_proficiency_scores(self) -> MatchingConfig:
        """Ensure every level is mapped and the mapping never decreases."""
        order = [
            ProficiencyLevel.BEGINNER,
            ProficiencyLevel.INTERMEDIATE,
            ProficiencyLevel.ADVANCED,
            ProficiencyLevel.EXPERT,
        ]
        missing = [level.value for level in order if level not in self.proficiency_scores]
        if missing:
            raise ValueError(f"proficiency_scores is missing levels: {', '.join(missing)}")

        values = [self.proficiency_scores[level] for level in order]
        if any(not (0.0 <= value <= 1.0) for value in values):
            raise ValueError("proficiency_scores values must be between 0.0 and 1.0")
        if any(later < earlier for earlier, later in zip(values, values[1:])):
            raise ValueError(
                "proficiency_scores must not decrease with proficiency "
                f"(got {dict(zip([level.value for level in order], values))})"
            )
        return self

    def weight_for(self, importance: ImportanceLevel) -> float:
        """Return the aggregation weight for an importance level."""
        if importance == ImportanceLevel.MANDATORY:
            return self.weight_mandatory
        if importance == ImportanceLevel.PREFERRED:
            return self.weight_preferred
        return self.weight_nice_to_have


# Singleton instance for easy import
_matching_config: MatchingConfig | None = None


def get_matching_config() -> MatchingConfig:
    """Get the matching configuration singleton."""
    global _matching_config
    if _matching_config is None:
        _matching_config = MatchingConfig()
    return _matching_config


def reset_matching_config() -> None:
    """Reset the matching configuration singleton (useful for testing)."""
    global _matching_config
    _matching_config = None
