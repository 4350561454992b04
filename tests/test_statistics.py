from __future__ import annotations

from datetime import UTC, datetime, timedelta

from quanta.analytics.stats import derive_stats
from quanta.domain.models import Bar, PriceSeries, TimeframeId


def _series(closes: list[float], volume: float | None = None) -> PriceSeries:
    start = datetime(2025, 1, 1, tzinfo=UTC)
    bars = tuple(
        Bar(
            time=start + timedelta(days=index),
            open=close,
            high=close + 2.0,
            low=max(close - 2.0, 0.0),
            close=close,
            volume=volume,
        )
        for index, close in enumerate(closes)
    )
    return PriceSeries(symbol="SPY", timeframe_id=TimeframeId.MONTH, bars=bars)


def test_change_is_last_minus_previous_close() -> None:
    series = _series([100.0, 103.7, 101.3], volume=2500.0)

    stats = derive_stats(series)

    assert stats.price == 101.3
    assert stats.change == series[-1].close - series[-2].close
    assert stats.percent_change == round((101.3 - 103.7) / 103.7 * 100, 2)
    assert stats.high == 103.3
    assert stats.low == 99.3
    assert stats.volume == 2500.0


def test_single_bar_series_degrades_to_zero_change() -> None:
    stats = derive_stats(_series([42.0]))

    assert stats.change == 0.0
    assert stats.percent_change == 0.0
    assert stats.price == 42.0


def test_zero_previous_close_does_not_divide_by_zero() -> None:
    stats = derive_stats(_series([0.0, 5.0]))

    assert stats.change == 5.0
    assert stats.percent_change == 0.0


def test_high_low_come_from_last_bar_not_session() -> None:
    stats = derive_stats(_series([500.0, 10.0]))

    assert stats.high == 12.0
    assert stats.low == 8.0


def test_display_formats_ticker_fields() -> None:
    shown = derive_stats(_series([100.0, 101.0])).display()

    assert shown == {
        "price": "101.00",
        "change": "+1.00",
        "pct": "+1.00%",
        "high": "103.00",
        "low": "99.00",
        "volume": "N/A",
    }


def test_display_keeps_sign_for_losses() -> None:
    shown = derive_stats(_series([100.0, 98.0], volume=1234567.0)).display()

    assert shown["change"] == "-2.00"
    assert shown["pct"] == "-2.00%"
    assert shown["volume"] == "1,234,567"
