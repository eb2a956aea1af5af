"""Profile improvement recommendations.

Public API:
- RecommendationService: Generates, stores and resolves recommendations
- RecommendationGenerator: Turns a DetailedMatch into recommendations
- RecommendationRepository: SQLite storage
- Recommendation, RecommendationType, Priority, RecommendationStatus: Models
- GenerationOptions, GenerateRecommendationsRequest: Generation filters
"""

from fitmatch.recommendations.generator import (
    RecommendationGenerator,
    prioritize_recommendations,
)
from fitmatch.recommendations.models import (
    GenerateRecommendationsRequest,
    GenerationOptions,
    Priority,
    Recommendation,
    RecommendationStatus,
    RecommendationType,
)
from fitmatch.recommendations.repository import RecommendationRepository
from fitmatch.recommendations.service import RecommendationService

__all__ = [
    "RecommendationService",
    "RecommendationGenerator",
    "RecommendationRepository",
    "Recommendation",
    "RecommendationType",
    "RecommendationStatus",
    "Priority",
    "GenerationOptions",
    "GenerateRecommendationsRequest",
    "prioritize_recommendations",
]
