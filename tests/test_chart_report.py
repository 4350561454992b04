from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from quanta.analytics.recommendation import RecommendationEngine
from quanta.analytics.stats import derive_stats
from quanta.domain.models import Bar, CacheEntry, PriceSeries, RequestKey, TimeframeId
from quanta.logging.chart import build_figure, render_chart_html


def _entry(simulated: bool) -> CacheEntry:
    start = datetime(2025, 1, 1, 14, 30, tzinfo=UTC)
    bars = tuple(
        Bar(time=start + timedelta(minutes=5 * i), open=c, high=c + 0.4, low=c - 0.4, close=c + 0.1)
        for i, c in enumerate([50.0, 50.3, 50.1, 50.6])
    )
    series = PriceSeries(symbol="AMD", timeframe_id=TimeframeId.INTRADAY, bars=bars)
    return CacheEntry(
        key=RequestKey.of("AMD", TimeframeId.INTRADAY),
        series=series,
        stats=derive_stats(series),
        simulated=simulated,
    )


def test_figure_carries_candles_and_provenance_badge() -> None:
    figure = build_figure(_entry(simulated=True))

    assert len(figure.data) == 1
    assert figure.data[0].type == "candlestick"
    assert list(figure.data[0].close) == pytest.approx([50.1, 50.4, 50.2, 50.7])
    assert "SIMULATED" in figure.layout.title.text
    assert "AMD 1D" in figure.layout.title.text


def test_figure_draws_support_and_resistance() -> None:
    entry = _entry(simulated=False)
    recommendation = RecommendationEngine().score("AMD", entry.series)

    figure = build_figure(entry, recommendation)

    levels = sorted(shape.y0 for shape in figure.layout.shapes)
    assert levels == [recommendation.support, recommendation.resistance]
    assert "LIVE" in figure.layout.title.text
    assert recommendation.verdict.value in figure.layout.title.text


def test_render_chart_writes_html(tmp_path: Path) -> None:
    entry = _entry(simulated=False)
    recommendation = RecommendationEngine().score("AMD", entry.series)
    output = tmp_path / "out" / "amd.html"

    path = render_chart_html(entry, str(output), recommendation=recommendation)

    assert path == output
    text = output.read_text(encoding="utf-8")
    assert "<html>" in text
    assert "consolidating" in text or "breaking" in text
