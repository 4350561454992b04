from __future__ import annotations

from datetime import UTC, datetime, timedelta

import numpy as np

from quanta.data.synthetic import DEFAULT_SEED_PRICE, SyntheticSeriesGenerator
from quanta.domain.models import TimeframeId

NOW = datetime(2025, 3, 14, 15, 47, 12, tzinfo=UTC)


def _generator(seed: int = 7) -> SyntheticSeriesGenerator:
    return SyntheticSeriesGenerator(rng=np.random.default_rng(seed), clock=lambda: NOW)


def test_synthetic_bars_respect_ohlc_ordering() -> None:
    series = _generator().generate(150.0, "1D")

    assert len(series) == 100
    for bar in series:
        assert bar.low <= min(bar.open, bar.close)
        assert bar.high >= max(bar.open, bar.close)


def test_intraday_times_step_five_minutes_and_end_now() -> None:
    series = _generator().generate(150.0, TimeframeId.INTRADAY, length=12)
    times = [bar.time for bar in series]

    assert all(later - earlier == timedelta(minutes=5) for earlier, later in zip(times, times[1:]))
    assert times[-1] == datetime(2025, 3, 14, 15, 45, tzinfo=UTC)


def test_date_buckets_step_daily_and_end_today() -> None:
    series = _generator().generate(150.0, "1Y", length=30)
    times = [bar.time for bar in series]

    assert all(later - earlier == timedelta(days=1) for earlier, later in zip(times, times[1:]))
    assert times[-1] == datetime(2025, 3, 14, tzinfo=UTC)
    assert series.timeframe_id == TimeframeId.YEAR


def test_walk_stays_anchored_to_seed_price() -> None:
    series = _generator().generate(80.0, "1W", length=5)

    # Five steps of at most ~0.9% each cannot drift more than 5% from the seed.
    assert abs(series[0].open - 80.0) <= 80.0 * 0.005
    assert all(abs(bar.close - 80.0) < 80.0 * 0.05 for bar in series)


def test_same_seed_reproduces_same_series() -> None:
    first = _generator(seed=3).generate(120.0, "1M", symbol="aapl")
    second = _generator(seed=3).generate(120.0, "1M", symbol="aapl")

    assert first == second
    assert first.symbol == "AAPL"


def test_bad_seed_and_length_never_fail() -> None:
    generator = _generator()

    from_garbage = generator.generate("not-a-price", "1D", length=0)
    from_negative = generator.generate(-5.0, "1D", length=3)

    assert len(from_garbage) == 1
    assert abs(from_garbage[0].open - DEFAULT_SEED_PRICE) <= DEFAULT_SEED_PRICE * 0.005
    assert len(from_negative) == 3
