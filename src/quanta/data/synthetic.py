"""Synthetic OHLC series used whenever live data is unavailable."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

import numpy as np

from quanta.data.timeframes import Timeframe, get_timeframe
from quanta.domain.models import Bar, PriceSeries, TimeframeId

DEFAULT_SEED_PRICE = 200.0
OPEN_DRIFT = 0.01
CLOSE_DRIFT = 0.008
WICK_MARGIN = 0.003


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class SyntheticSeriesGenerator:
    """Bounded random walk anchored to a seed price.

    The random source and clock are injectable so tests can pin both.
    """

    def __init__(
        self,
        rng: np.random.Generator | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.rng = rng if rng is not None else np.random.default_rng()
        self.clock = clock or _utc_now

    def generate(
        self,
        seed_price: float | str | None,
        timeframe: TimeframeId | Timeframe | str,
        length: int = 100,
        symbol: str = "SIM",
    ) -> PriceSeries:
        frame = get_timeframe(timeframe)
        count = max(1, int(length))
        price = self._coerce_seed(seed_price)
        end = self._end_bucket(frame)

        bars: list[Bar] = []
        for index in range(count):
            open_price = price + (self.rng.random() - 0.5) * (price * OPEN_DRIFT)
            close_price = open_price + (self.rng.random() - 0.5) * (price * CLOSE_DRIFT)
            margin = price * WICK_MARGIN
            bars.append(
                Bar(
                    time=end - (count - 1 - index) * frame.bucket,
                    open=open_price,
                    high=max(open_price, close_price) + margin,
                    low=min(open_price, close_price) - margin,
                    close=close_price,
                )
            )
            price = close_price
        return PriceSeries(symbol=symbol.strip().upper(), timeframe_id=frame.id, bars=tuple(bars))

    def _end_bucket(self, frame: Timeframe) -> datetime:
        now = self.clock().astimezone(UTC)
        if frame.intraday:
            bucket_seconds = int(frame.bucket.total_seconds())
            floored = int(now.timestamp()) // bucket_seconds * bucket_seconds
            return datetime.fromtimestamp(floored, tz=UTC)
        return now.replace(hour=0, minute=0, second=0, microsecond=0)

    @staticmethod
    def _coerce_seed(seed_price: float | str | None) -> float:
        try:
            value = float(seed_price) if seed_price is not None else DEFAULT_SEED_PRICE
        except (TypeError, ValueError):
            return DEFAULT_SEED_PRICE
        if not np.isfinite(value) or value <= 0:
            return DEFAULT_SEED_PRICE
        return value
