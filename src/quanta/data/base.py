"""Market data client contract and its two-branch result type."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from quanta.data.timeframes import Timeframe
from quanta.domain.models import PriceSeries, TimeframeId


@dataclass(frozen=True)
class LiveResult:
    """Series normalized from the upstream provider."""

    series: PriceSeries
    simulated: bool = False


@dataclass(frozen=True)
class SimulatedResult:
    """Synthetic stand-in produced after the upstream failed."""

    series: PriceSeries
    reason: str
    simulated: bool = True


FetchResult = LiveResult | SimulatedResult


class MarketDataClient(Protocol):
    """Interface for series retrieval with built-in degradation."""

    async def fetch(
        self,
        symbol: str,
        timeframe: TimeframeId | Timeframe | str,
    ) -> FetchResult:
        """Return a live series or a simulated stand-in; never raise for upstream faults."""
