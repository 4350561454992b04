"""Domain models."""

from .models import (
    Bar,
    CacheEntry,
    PriceSeries,
    Recommendation,
    RequestKey,
    Stats,
    TimeframeId,
    Verdict,
)

__all__ = [
    "Bar",
    "CacheEntry",
    "PriceSeries",
    "Recommendation",
    "RequestKey",
    "Stats",
    "TimeframeId",
    "Verdict",
]
