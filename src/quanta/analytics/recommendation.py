"""Deterministic momentum heuristic that stands in for the advisory model."""

from __future__ import annotations

from dataclasses import dataclass

from quanta.domain.models import PriceSeries, Recommendation, Verdict


@dataclass(frozen=True)
class RecommendationParams:
    """Parameter set for the momentum heuristic."""

    lookback_bars: int = 10
    threshold: float = 0.01
    band_pct: float = 0.01
    buy_base: int = 70
    sell_base: int = 30
    hold_base: int = 50
    points_per_pct: int = 5


def clamp_score(value: int) -> int:
    """Clamp a score to the inclusive 0-100 range."""
    return max(0, min(100, value))


class RecommendationEngine:
    """Score a series or a manual price into BUY/SELL/HOLD."""

    def __init__(self, params: RecommendationParams | None = None) -> None:
        params = params or RecommendationParams()
        if params.lookback_bars <= 0:
            raise ValueError("lookback_bars must be positive")
        if params.threshold < 0:
            raise ValueError("threshold must be non-negative")
        if params.band_pct <= 0:
            raise ValueError("band_pct must be positive")
        self.params = params

    def score(
        self,
        symbol: str,
        source: PriceSeries | float,
        change_pct: float = 0.0,
    ) -> Recommendation:
        """Score a full series, or a manual price with an optional percent change."""
        name = symbol.strip().upper()
        if isinstance(source, PriceSeries):
            return self._score_series(name, source)
        return self._score_price(name, float(source), change_pct)

    def momentum(self, series: PriceSeries) -> float:
        closes = series.closes()
        current_price = closes[-1]
        if len(closes) > self.params.lookback_bars:
            reference_price = closes[-1 - self.params.lookback_bars]
        else:
            reference_price = sum(closes) / len(closes)
        if reference_price == 0:
            return 0.0
        return (current_price - reference_price) / reference_price

    def _score_series(self, symbol: str, series: PriceSeries) -> Recommendation:
        window = series.bars[-(self.params.lookback_bars + 1):]
        support = round(min(bar.low for bar in window), 2)
        resistance = round(max(bar.high for bar in window), 2)
        return self._decide(symbol, self.momentum(series), support, resistance, len(window))

    def _score_price(self, symbol: str, price: float, change_pct: float) -> Recommendation:
        if price <= 0:
            raise ValueError("manual price must be positive")
        band = price * self.params.band_pct
        support = round(price - band, 2)
        resistance = round(price + band, 2)
        return self._decide(symbol, change_pct / 100.0, support, resistance, 1)

    def _decide(
        self,
        symbol: str,
        momentum: float,
        support: float,
        resistance: float,
        bars_used: int,
    ) -> Recommendation:
        points = round(abs(momentum) * 100 * self.params.points_per_pct)
        if momentum > self.params.threshold:
            verdict = Verdict.BUY
            score = clamp_score(self.params.buy_base + points)
            insight = (
                f"{symbol} is breaking out: momentum {momentum:+.2%} across {bars_used} bars, "
                f"next resistance near {resistance:.2f}."
            )
        elif momentum < -self.params.threshold:
            verdict = Verdict.SELL
            score = clamp_score(self.params.sell_base - points)
            insight = (
                f"{symbol} is breaking support: momentum {momentum:+.2%} across {bars_used} bars, "
                f"support near {support:.2f} is under pressure."
            )
        else:
            verdict = Verdict.HOLD
            drift = round(momentum * 100 * self.params.points_per_pct)
            score = clamp_score(self.params.hold_base + drift)
            insight = (
                f"{symbol} is consolidating between {support:.2f} and {resistance:.2f} "
                f"(momentum {momentum:+.2%})."
            )
        return Recommendation(
            verdict=verdict,
            score=score,
            insight=insight,
            support=support,
            resistance=resistance,
            source="heuristic",
        )
