"""Result models for the matching engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from fitmatch.errors import ErrorCode
from fitmatch.job.models import ImportanceLevel, JobRequirement, RequirementType


def _check_unit_interval(name: str, value: float) -> None:
    if not (0.0 <= value <= 1.0):
        raise ValueError(f"{name} must be between 0.0 and 1.0 (got {value})")


@dataclass(frozen=True)
class ComparisonResult:
    """Outcome of comparing one requirement against a profile."""

    score: float
    satisfied: bool
    rationale: str

    def __post_init__(self) -> None:
        _check_unit_interval("score", self.score)


@dataclass(frozen=True)
class RequirementMatch:
    """Per-requirement breakdown retained by the detailed analyzer."""

    requirement: JobRequirement
    type: RequirementType
    importance: ImportanceLevel
    mandatory: bool
    weight: float
    score: float
    satisfied: bool
    rationale: str

    def __post_init__(self) -> None:
        _check_unit_interval("score", self.score)

    def to_dict(self) -> dict[str, Any]:
        return {
            "requirement": self.requirement.text,
            "type": self.type.value,
            "importance": self.importance.value,
            "mandatory": self.mandatory,
            "weight": self.weight,
            "score": self.score,
            "satisfied": self.satisfied,
            "rationale": self.rationale,
        }


@dataclass
class MatchResult:
    """Overall fit of a profile version against a job.

    Attributes:
        overall_score: Weighted, penalized score in [0, 1].
        category_scores: Weighted average score per requirement type present.
        mandatory_miss_count: Number of unsatisfied mandatory requirements.
        profile_version: Version of the profile that was scored.
        insufficient_data: True when the job has no requirements or the
            profile carries no usable features.
            Serialized as an ``INSUFFICIENT_DATA`` warning code.
        computed_at: When the score was computed.
    """

    overall_score: float
    category_scores: dict[RequirementType, float] = field(default_factory=dict)
    mandatory_miss_count: int = 0
    profile_version: int | None = None
    insufficient_data: bool = False
    computed_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        _check_unit_interval("overall_score", self.overall_score)
        for category, value in self.category_scores.items():
            _check_unit_interval(f"category_scores[{category.value}]", value)
        if self.mandatory_miss_count < 0:
            raise ValueError("mandatory_miss_count must be >= 0")

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall_score": self.overall_score,
            "category_scores": {
                category.value: value for category, value in self.category_scores.items()
            },
            "mandatory_miss_count": self.mandatory_miss_count,
            "profile_version": self.profile_version,
            "insufficient_data": self.insufficient_data,
            "warnings": [ErrorCode.INSUFFICIENT_DATA.value] if self.insufficient_data else [],
            "computed_at": self.computed_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MatchResult:
        computed_at = data.get("computed_at")
        return cls(
            overall_score=float(data["overall_score"]),
            category_scores={
                RequirementType(key): float(value)
                for key, value in (data.get("category_scores") or {}).items()
            },
            mandatory_miss_count=int(data.get("mandatory_miss_count", 0)),
            profile_version=data.get("profile_version"),
            insufficient_data=bool(data.get("insufficient_data", False)),
            computed_at=datetime.fromisoformat(computed_at)
            if computed_at
            else datetime.now(UTC),
        )


@dataclass
class DetailedMatch(MatchResult):
    """MatchResult plus the explanation shown to the user.

    Attributes:
        per_requirement: Comparator outcome for every requirement, in job order.
        strengths: Requirements scoring at or above the strength threshold,
            heaviest first.
        gaps: Unsatisfied requirements, mandatory first then heaviest first.
        suggestions: One suggested wording line per gap, in gap order.
    """

    per_requirement: list[RequirementMatch] = field(default_factory=list)
    strengths: list[RequirementMatch] = field(default_factory=list)
    gaps: list[RequirementMatch] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)

    def to_match_result(self) -> MatchResult:
        """Return the plain MatchResult view of this analysis."""
        return MatchResult(
            overall_score=self.overall_score,
            category_scores=dict(self.category_scores),
            mandatory_miss_count=self.mandatory_miss_count,
            profile_version=self.profile_version,
            insufficient_data=self.insufficient_data,
            computed_at=self.computed_at,
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["per_requirement"] = [item.to_dict() for item in self.per_requirement]
        data["strengths"] = [item.to_dict() for item in self.strengths]
        data["gaps"] = [item.to_dict() for item in self.gaps]
        data["suggestions"] = list(self.suggestions)
        return data
