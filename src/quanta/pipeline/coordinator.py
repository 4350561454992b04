"""Request deduplication, caching and ordered delivery of resolved series."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from quanta.analytics.advisor import RecommendationService
from quanta.analytics.stats import derive_stats
from quanta.data.base import MarketDataClient
from quanta.data.timeframes import Timeframe, get_timeframe
from quanta.domain.models import CacheEntry, Recommendation, RequestKey, TimeframeId
from quanta.pipeline.cache import MarketCache


@dataclass(frozen=True)
class SeriesUpdate:
    """A resolution that became the displayed state."""

    ticket: int
    entry: CacheEntry


@dataclass(frozen=True)
class RecommendationUpdate:
    """A recommendation computed for the displayed state."""

    ticket: int
    key: RequestKey
    recommendation: Recommendation


Update = SeriesUpdate | RecommendationUpdate
Listener = Callable[[Update], None]


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class RequestCoordinator:
    """Resolve (symbol, timeframe) requests through cache, client and fallback.

    Each non-repeat request takes a monotonically increasing ticket. Only the
    latest ticket may update ``current`` or ``current_recommendation``; late
    completions are cached but never displayed.
    """

    def __init__(
        self,
        client: MarketDataClient,
        cache: MarketCache | None = None,
        recommender: RecommendationService | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.client = client
        self.cache = cache if cache is not None else MarketCache()
        self.recommender = recommender
        self.clock = clock or _utc_now
        self.current: CacheEntry | None = None
        self.current_recommendation: Recommendation | None = None
        self.logger = logging.getLogger("quanta.pipeline")
        self._sequence = 0
        self._last_key: RequestKey | None = None
        self._inflight: dict[RequestKey, asyncio.Task[CacheEntry]] = {}
        self._pending: set[asyncio.Task[None]] = set()
        self._listeners: list[Listener] = []

    @property
    def latest_ticket(self) -> int:
        return self._sequence

    def subscribe(self, listener: Listener) -> None:
        """Register a callable receiving series and recommendation updates."""
        self._listeners.append(listener)

    async def resolve(
        self,
        symbol: str,
        timeframe: TimeframeId | Timeframe | str,
    ) -> CacheEntry:
        """Return the cache entry for the request, fetching at most once per key."""
        frame = get_timeframe(timeframe)
        key = RequestKey.of(symbol, frame.id)

        if key == self._last_key:
            inflight = self._inflight.get(key)
            if inflight is not None:
                return await asyncio.shield(inflight)
            cached = self.cache.get(key)
            if cached is not None:
                self.logger.debug("Repeat request for %s served without a new ticket", key)
                return cached

        self._sequence += 1
        ticket = self._sequence
        self._last_key = key

        cached = self.cache.get(key)
        if cached is not None:
            self.logger.debug("Cache hit for %s (ticket %s)", key, ticket)
            self._apply(ticket, cached)
            return cached

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.create_task(self._load(key, frame))
            self._inflight[key] = task
            task.add_done_callback(lambda _done, key=key: self._inflight.pop(key, None))
        entry = await asyncio.shield(task)
        self._apply(ticket, entry)
        return entry

    async def drain(self) -> None:
        """Wait until every scheduled recommendation has been delivered."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def _load(self, key: RequestKey, frame: Timeframe) -> CacheEntry:
        result = await self.client.fetch(key.symbol, frame)
        entry = CacheEntry(
            key=key,
            series=result.series,
            stats=derive_stats(result.series),
            simulated=result.simulated,
            inserted_at=self.clock(),
        )
        self.cache.put(entry)
        self.logger.info(
            "Resolved %s with %s bars (%s)",
            key,
            len(entry.series),
            entry.provenance,
        )
        return entry

    def _apply(self, ticket: int, entry: CacheEntry) -> None:
        if ticket != self._sequence:
            self.logger.debug(
                "Discarding stale resolution for %s (ticket %s, latest %s)",
                entry.key,
                ticket,
                self._sequence,
            )
            return
        self.current = entry
        self._publish(SeriesUpdate(ticket=ticket, entry=entry))
        if self.recommender is not None:
            task = asyncio.create_task(self._recommend(ticket, entry))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

    async def _recommend(self, ticket: int, entry: CacheEntry) -> None:
        if self.recommender is None:
            return
        recommendation = await self.recommender.recommend(entry.key.symbol, entry)
        if ticket != self._sequence:
            self.logger.debug("Discarding stale recommendation for %s", entry.key)
            return
        self.current_recommendation = recommendation
        self._publish(
            RecommendationUpdate(ticket=ticket, key=entry.key, recommendation=recommendation)
        )

    def _publish(self, update: Update) -> None:
        for listener in self._listeners:
            listener(update)
