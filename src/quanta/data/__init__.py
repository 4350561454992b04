"""Market data acquisition: timeframe catalog, upstream client and synthetic fallback."""

from .alpha_vantage import AlphaVantageClient
from .base import FetchResult, LiveResult, MarketDataClient, SimulatedResult
from .synthetic import SyntheticSeriesGenerator
from .timeframes import Timeframe, available_timeframes, get_timeframe

__all__ = [
    "AlphaVantageClient",
    "FetchResult",
    "LiveResult",
    "MarketDataClient",
    "SimulatedResult",
    "SyntheticSeriesGenerator",
    "Timeframe",
    "available_timeframes",
    "get_timeframe",
]
