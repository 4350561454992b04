"""Request coordination and result caching."""

from .cache import MarketCache
from .coordinator import RecommendationUpdate, RequestCoordinator, SeriesUpdate

__all__ = ["MarketCache", "RecommendationUpdate", "RequestCoordinator", "SeriesUpdate"]
