"""Runtime wiring and terminal entry points."""

from __future__ import annotations

import asyncio

from quanta.analytics.advisor import GeminiAdvisor, RecommendationService
from quanta.analytics.recommendation import RecommendationEngine
from quanta.config import Settings
from quanta.data.alpha_vantage import AlphaVantageClient
from quanta.data.synthetic import SyntheticSeriesGenerator
from quanta.domain.models import CacheEntry, Recommendation
from quanta.logging.chart import render_chart_html
from quanta.logging.logger import TerminalLogger
from quanta.pipeline.cache import MarketCache
from quanta.pipeline.coordinator import RecommendationUpdate, RequestCoordinator, Update
from quanta.state.watchlist import SqliteWatchlistStore, WatchlistStore


def build_client(settings: Settings) -> AlphaVantageClient:
    return AlphaVantageClient(
        api_key=settings.alpha_vantage_api_key,
        generator=SyntheticSeriesGenerator(),
        timeout=settings.request_timeout_seconds,
        max_attempts=settings.max_attempts,
        base_delay=settings.backoff_base_seconds,
        backoff_factor=settings.backoff_factor,
        seed_price=settings.synthetic_seed_price,
        synthetic_length=settings.synthetic_length,
    )


def build_recommender(settings: Settings) -> RecommendationService:
    advisor = None
    if settings.advisor_enabled():
        advisor = GeminiAdvisor(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            timeout=settings.request_timeout_seconds,
        )
    return RecommendationService(engine=RecommendationEngine(), advisor=advisor)


def build_coordinator(settings: Settings) -> RequestCoordinator:
    return RequestCoordinator(
        client=build_client(settings),
        cache=MarketCache(ttl_seconds=settings.cache_ttl_seconds),
        recommender=build_recommender(settings),
    )


def build_watchlist_store(settings: Settings) -> WatchlistStore:
    return SqliteWatchlistStore(settings.state_db_path)


async def resolve_symbols(
    coordinator: RequestCoordinator,
    symbols: list[str],
    timeframe: str,
) -> tuple[list[CacheEntry], dict[str, Recommendation]]:
    """Resolve symbols concurrently and collect every delivered recommendation."""
    recommendations: dict[str, Recommendation] = {}

    def on_update(update: Update) -> None:
        if isinstance(update, RecommendationUpdate):
            recommendations[update.key.symbol] = update.recommendation

    coordinator.subscribe(on_update)
    entries = await asyncio.gather(
        *(coordinator.resolve(symbol, timeframe) for symbol in symbols)
    )
    await coordinator.drain()
    return list(entries), recommendations


def run(settings: Settings, chart_out: str | None = None) -> int:
    """Resolve the configured symbols, print quotes and advice, optionally chart."""
    logger = TerminalLogger(level=settings.log_level)
    coordinator = build_coordinator(settings)
    entries, recommendations = asyncio.run(
        resolve_symbols(coordinator, settings.symbols, settings.timeframe)
    )

    # Only the latest request owns the recommendation panel; score the rest directly.
    engine = RecommendationEngine()
    for entry in entries:
        logger.quote(entry)
        recommendation = recommendations.get(entry.key.symbol)
        if recommendation is None:
            recommendation = engine.score(entry.key.symbol, entry.series)
            recommendations[entry.key.symbol] = recommendation
        logger.advice(entry.key.symbol, recommendation)

    if chart_out and coordinator.current is not None:
        current = coordinator.current
        path = render_chart_html(
            current,
            chart_out,
            recommendation=recommendations.get(current.key.symbol),
        )
        logger.chart(str(path))
    return 0


def manual_advice(settings: Settings, symbol: str, price: float, change_pct: float = 0.0) -> int:
    """Score a manually entered price without touching the network."""
    logger = TerminalLogger(level=settings.log_level)
    try:
        recommendation = RecommendationEngine().score(symbol, price, change_pct=change_pct)
    except ValueError as exc:
        logger.error(str(exc))
        return 2
    logger.advice(symbol.strip().upper(), recommendation)
    return 0


def manage_favorites(
    settings: Settings,
    add: str | None = None,
    remove: str | None = None,
) -> list[str]:
    """Apply an optional add/remove to the favorites and return the stored list."""
    store = build_watchlist_store(settings)
    try:
        if add:
            return store.add(add)
        if remove:
            return store.remove(remove)
        return store.load()
    finally:
        store.close()


def show_favorites(settings: Settings, add: str | None = None, remove: str | None = None) -> int:
    logger = TerminalLogger(level=settings.log_level)
    logger.favorites(manage_favorites(settings, add=add, remove=remove))
    return 0
