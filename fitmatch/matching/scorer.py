"""Match scoring: aggregates per-requirement comparisons into a MatchResult."""

from __future__ import annotations

import logging
from datetime import date

from fitmatch.errors import MatchingError
from fitmatch.job.models import Job, JobRequirement, RequirementType
from fitmatch.matching.classifier import classify
from fitmatch.matching.comparator import FeatureComparator
from fitmatch.matching.config import MatchingConfig, get_matching_config
from fitmatch.matching.models import MatchResult, RequirementMatch
from fitmatch.profile.models import Profile

logger = logging.getLogger(__name__)


class MatchScorer:
    """Stateless scorer for a (profile, job) pair.

    ``overall_score`` is the importance-weighted mean of comparator scores,
    where an unsatisfied mandatory requirement counts as 0, minus a fixed
    penalty per such requirement, clamped to [0, 1]. Identical inputs always
    give identical results apart from ``computed_at``.
    """

    def __init__(
        self,
        config: MatchingConfig | None = None,
        comparator: FeatureComparator | None = None,
    ) -> None:
        self.config = config or get_matching_config()
        self.comparator = comparator or FeatureComparator(config=self.config)

    def score(self, profile: Profile, job: Job, today: date | None = None) -> MatchResult:
        """Compute the overall match of a profile version against a job."""
        result, _ = self.score_requirements(profile, job, today=today)
        return result

    def score_requirements(
        self, profile: Profile, job: Job, today: date | None = None
    ) -> tuple[MatchResult, list[RequirementMatch]]:
        """Score a job and keep the per-requirement breakdown.

        Returns:
            The MatchResult and one RequirementMatch per job requirement, in
            job order.

        Raises:
            MatchingError: INVALID_OPERATION if a comparator heuristic fails
                (e.g. a work history entry that ends before it starts).
        """
        matches = [
            self._compare(requirement, profile, today) for requirement in job.requirements
        ]
        result = self.aggregate(matches, profile)

        logger.debug(
            "Scored profile %s v%s against job %s: overall=%.3f misses=%d",
            profile.id,
            profile.version,
            job.id,
            result.overall_score,
            result.mandatory_miss_count,
        )
        return result, matches

    def _compare(
        self, requirement: JobRequirement, profile: Profile, today: date | None
    ) -> RequirementMatch:
        classified = classify(requirement)
        try:
            comparison = self.comparator.compare(classified, profile, today=today)
        except MatchingError:
            raise
        except Exception as e:
            raise MatchingError.invalid_operation(
                f"Could not compare requirement '{classified.text}': {e}",
                original_error=e,
            ) from e

        return RequirementMatch(
            requirement=classified,
            type=classified.type,
            importance=classified.importance,
            mandatory=bool(classified.mandatory),
            weight=self.config.weight_for(classified.importance),
            score=comparison.score,
            satisfied=comparison.satisfied,
            rationale=comparison.rationale,
        )

    def aggregate(
        self, matches: list[RequirementMatch], profile: Profile
    ) -> MatchResult:
        """Fold per-requirement matches into a MatchResult.

        With zero requirements the overall score is 0 and the result is
        flagged as insufficient data rather than failing.
        """
        insufficient = not matches or not profile.has_features()

        if not matches:
            return MatchResult(
                overall_score=0.0,
                category_scores={},
                mandatory_miss_count=0,
                profile_version=profile.version,
                insufficient_data=True,
            )

        total_weight = sum(match.weight for match in matches)
        # Unsatisfied mandatory requirements contribute nothing, however close.
        weighted = sum(
            match.weight * (0.0 if match.mandatory and not match.satisfied else match.score)
            for match in matches
        )
        base_score = _clamp(weighted / total_weight)

        misses = sum(1 for match in matches if match.mandatory and not match.satisfied)
        overall = _clamp(base_score - misses * self.config.mandatory_miss_penalty)

        return MatchResult(
            overall_score=overall,
            category_scores=_category_scores(matches),
            mandatory_miss_count=misses,
            profile_version=profile.version,
            insufficient_data=insufficient,
        )


def _category_scores(matches: list[RequirementMatch]) -> dict[RequirementType, float]:
    weights: dict[RequirementType, float] = {}
    sums: dict[RequirementType, float] = {}
    for match in matches:
        weights[match.type] = weights.get(match.type, 0.0) + match.weight
        sums[match.type] = sums.get(match.type, 0.0) + match.weight * match.score
    return {
        category: _clamp(sums[category] / weights[category])
        for category in RequirementType
        if category in weights
    }


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))
