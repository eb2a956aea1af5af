"""Requirement classification, comparison and match scoring.

Public API:
- MatchScorer: Weighted, penalized overall score for a profile/job pair
- DetailedAnalyzer: Score plus strengths, gaps and suggested wording
- FeatureComparator: Per-requirement comparison against a profile
- classify, classify_requirement, classify_job: Requirement classification
- MatchResult, DetailedMatch, RequirementMatch, ComparisonResult: Results
- MatchingConfig: Tunables (MATCHING_ environment prefix)
"""

from fitmatch.matching.analyzer import DetailedAnalyzer
from fitmatch.matching.classifier import (
    Classification,
    classify,
    classify_job,
    classify_requirement,
    determine_importance_level,
    determine_requirement_type,
    is_requirement_mandatory,
)
from fitmatch.matching.comparator import FeatureComparator
from fitmatch.matching.config import (
    MatchingConfig,
    get_matching_config,
    reset_matching_config,
)
from fitmatch.matching.models import (
    ComparisonResult,
    DetailedMatch,
    MatchResult,
    RequirementMatch,
)
from fitmatch.matching.scorer import MatchScorer

__all__ = [
    "MatchScorer",
    "DetailedAnalyzer",
    "FeatureComparator",
    "Classification",
    "classify",
    "classify_job",
    "classify_requirement",
    "determine_importance_level",
    "determine_requirement_type",
    "is_requirement_mandatory",
    "MatchingConfig",
    "get_matching_config",
    "reset_matching_config",
    "ComparisonResult",
    "DetailedMatch",
    "MatchResult",
    "RequirementMatch",
]
