"""Detailed match analysis for user display."""

from __future__ import annotations

from datetime import date

from fitmatch.job.models import Job, RequirementType
from fitmatch.matching.matchers import extract_skill_term
from fitmatch.matching.models import DetailedMatch, RequirementMatch
from fitmatch.matching.scorer import MatchScorer
from fitmatch.profile.models import Profile


class DetailedAnalyzer:
    """Wraps the MatchScorer and keeps the per-requirement explanations.

    The overall score comes from the scorer's own aggregation, so a
    DetailedMatch always agrees with ``MatchScorer.score`` on the same inputs.
    """

    def __init__(self, scorer: MatchScorer | None = None) -> None:
        self.scorer = scorer or MatchScorer()

    def analyze(self, profile: Profile, job: Job, today: date | None = None) -> DetailedMatch:
        """Score a job and derive strengths, gaps and suggested wording."""
        config = self.scorer.config
        result, matches = self.scorer.score_requirements(profile, job, today=today)

        strengths = sorted(
            (m for m in matches if m.score >= config.strength_threshold),
            key=lambda m: -m.weight,
        )
        gaps = sorted(
            (m for m in matches if not m.satisfied),
            key=lambda m: (not m.mandatory, -m.weight),
        )

        return DetailedMatch(
            overall_score=result.overall_score,
            category_scores=result.category_scores,
            mandatory_miss_count=result.mandatory_miss_count,
            profile_version=result.profile_version,
            insufficient_data=result.insufficient_data,
            computed_at=result.computed_at,
            per_requirement=matches,
            strengths=strengths,
            gaps=gaps,
            suggestions=[suggest_wording(gap) for gap in gaps],
        )


def suggest_wording(match: RequirementMatch) -> str:
    """One line of suggested wording for closing a gap."""
    text = match.requirement.text
    if match.type == RequirementType.SKILL:
        term = extract_skill_term(text)
        if match.score > 0:
            return f"List {term} in your skills with your actual proficiency and a project that used it"
        return f"Add {term} to your skills if you have used it, or plan to learn it"
    if match.type == RequirementType.EXPERIENCE:
        if match.score > 0:
            return f"Describe the scope and duration of roles that relate to: {text}"
        return f"Highlight any work, projects or freelance roles relevant to: {text}"
    if match.type == RequirementType.EDUCATION:
        return f"Mention degrees, courses or certifications that cover: {text}"
    if match.type == RequirementType.SOFT_SKILL:
        return f"Give a concrete example in your summary that demonstrates: {text}"
    return f"Address this in your summary or role descriptions: {text}"
