"""Summary statistics derived from a price series."""

from __future__ import annotations

from quanta.domain.models import PriceSeries, Stats


def derive_stats(series: PriceSeries) -> Stats:
    """Derive last price, change, percent change, high/low and volume.

    High and low come from the last bar only, matching the per-bar ticker display.
    """
    latest = series.last
    if len(series) < 2:
        return Stats(
            price=latest.close,
            change=0.0,
            percent_change=0.0,
            high=latest.high,
            low=latest.low,
            volume=latest.volume,
        )
    previous_close = series[-2].close
    change = latest.close - previous_close
    percent_change = 0.0 if previous_close == 0 else round(change / previous_close * 100, 2)
    return Stats(
        price=latest.close,
        change=change,
        percent_change=percent_change,
        high=latest.high,
        low=latest.low,
        volume=latest.volume,
    )
