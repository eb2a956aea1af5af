"""Recommendation generation from a detailed match analysis."""

from __future__ import annotations

import logging

from fitmatch.job.models import ImportanceLevel, RequirementType
from fitmatch.matching.config import MatchingConfig, get_matching_config
from fitmatch.matching.matchers import extract_skill_term
from fitmatch.matching.models import DetailedMatch, RequirementMatch
from fitmatch.recommendations.models import (
    GenerationOptions,
    Priority,
    Recommendation,
    RecommendationType,
)

logger = logging.getLogger(__name__)

_PRIORITY_BY_IMPORTANCE: dict[ImportanceLevel, Priority] = {
    ImportanceLevel.MANDATORY: Priority.HIGH,
    ImportanceLevel.PREFERRED: Priority.MEDIUM,
    ImportanceLevel.NICE_TO_HAVE: Priority.LOW,
}


class RecommendationGenerator:
    """Turns unmet and partially met requirements into pending recommendations."""

    def __init__(self, config: MatchingConfig | None = None) -> None:
        self.config = config or get_matching_config()

    def generate(
        self,
        detailed: DetailedMatch,
        profile_id: str,
        job_id: str | None = None,
        options: GenerationOptions | None = None,
    ) -> list[Recommendation]:
        """Create one recommendation per gap or partially met requirement.

        Gaps come first in the analyzer's gap order, followed by satisfied
        requirements scoring in (0, partial_threshold), in job order.
        Results are not yet prioritized; see :func:`prioritize_recommendations`.
        """
        targets: list[RequirementMatch] = list(detailed.gaps)
        seen = {id(match) for match in targets}
        for match in detailed.per_requirement:
            if id(match) in seen:
                continue
            if 0.0 < match.score < self.config.partial_threshold:
                targets.append(match)

        recommendations = [
            self.build_recommendation(match, profile_id, job_id) for match in targets
        ]

        if options is not None:
            recommendations = _apply_options(recommendations, options)

        logger.debug(
            "Generated %d recommendation(s) for profile %s job %s",
            len(recommendations),
            profile_id,
            job_id,
        )
        return recommendations

    def build_recommendation(
        self, match: RequirementMatch, profile_id: str, job_id: str | None
    ) -> Recommendation:
        rec_type = recommendation_type_for(match)
        title, description = _describe(rec_type, match)
        return Recommendation(
            profile_id=profile_id,
            job_id=job_id,
            type=rec_type,
            priority=_PRIORITY_BY_IMPORTANCE[match.importance],
            related_requirement=match.requirement.text,
            requirement_type=match.type,
            weight=match.weight,
            title=title,
            description=description,
        )


def recommendation_type_for(match: RequirementMatch) -> RecommendationType:
    if match.type == RequirementType.SKILL:
        return RecommendationType.ADD_SKILL
    if match.type == RequirementType.EXPERIENCE:
        if match.score > 0.0:
            return RecommendationType.REWORD_EXPERIENCE
        return RecommendationType.EMPHASIZE_ROLE
    if match.type == RequirementType.EDUCATION:
        return RecommendationType.ADD_CERTIFICATION
    if match.type == RequirementType.SOFT_SKILL:
        return RecommendationType.IMPROVE_SOFT_SKILLS
    return RecommendationType.GENERIC_IMPROVEMENT


def _describe(rec_type: RecommendationType, match: RequirementMatch) -> tuple[str, str]:
    text = match.requirement.text
    if rec_type == RecommendationType.ADD_SKILL:
        term = extract_skill_term(text)
        if match.score > 0.0:
            return (
                f"Deepen {term}",
                f"Your profile shows {term} below the level this job asks for. "
                "Add projects or responsibilities that demonstrate it.",
            )
        return (
            f"Add {term}",
            f"The job asks for {term}. Add it to your skills if you have it, "
            "or consider learning it.",
        )
    if rec_type == RecommendationType.REWORD_EXPERIENCE:
        return (
            "Reword experience",
            f"Rephrase your role descriptions to show experience matching: {text}",
        )
    if rec_type == RecommendationType.EMPHASIZE_ROLE:
        return (
            "Emphasize relevant roles",
            f"Bring forward roles, projects or freelance work relevant to: {text}",
        )
    if rec_type == RecommendationType.ADD_CERTIFICATION:
        return (
            "Add education or certification",
            f"Add a degree, course or certification covering: {text}",
        )
    if rec_type == RecommendationType.IMPROVE_SOFT_SKILLS:
        return (
            "Show soft skills",
            f"Add a concrete example to your summary demonstrating: {text}",
        )
    return (
        "Improve profile",
        f"Address this requirement in your summary or role descriptions: {text}",
    )


def prioritize_recommendations(
    recommendations: list[Recommendation],
) -> list[Recommendation]:
    """Stable sort by priority, then requirement weight, both descending.

    Ties keep their original generation order.
    """
    return sorted(
        recommendations,
        key=lambda rec: (-rec.priority.rank, -rec.weight),
    )


def _apply_options(
    recommendations: list[Recommendation], options: GenerationOptions
) -> list[Recommendation]:
    result = recommendations
    if options.types:
        allowed = set(options.types)
        result = [rec for rec in result if rec.type in allowed]
    if options.min_priority is not None:
        floor = options.min_priority.rank
        result = [rec for rec in result if rec.priority.rank >= floor]
    if options.max_recommendations is not None:
        result = prioritize_recommendations(result)[: options.max_recommendations]
    return result
