"""Statistics and advisory recommendations."""

from .advisor import GeminiAdvisor, RecommendationService
from .recommendation import RecommendationEngine, RecommendationParams
from .stats import derive_stats

__all__ = [
    "GeminiAdvisor",
    "RecommendationEngine",
    "RecommendationParams",
    "RecommendationService",
    "derive_stats",
]
