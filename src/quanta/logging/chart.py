"""Plotly candlestick report for a resolved series."""

from __future__ import annotations

import html
from pathlib import Path

import plotly.graph_objects as go

from quanta.domain.models import CacheEntry, Recommendation

UP_COLOR = "#238636"
DOWN_COLOR = "#da3633"
BACKGROUND = "#020408"


def build_figure(entry: CacheEntry, recommendation: Recommendation | None = None) -> go.Figure:
    """Build a candlestick figure with stats title and optional support/resistance."""
    frame = entry.series.to_frame()
    shown = entry.stats.display()
    badge = "SIMULATED" if entry.simulated else "LIVE"
    title = (
        f"{entry.key.symbol} {entry.key.timeframe_id.value} | ${shown['price']} "
        f"{shown['change']} ({shown['pct']}) | {badge}"
    )
    if recommendation is not None:
        title += f" | {recommendation.verdict.value} {recommendation.score}"

    figure = go.Figure(
        data=[
            go.Candlestick(
                x=frame.index,
                open=frame["open"],
                high=frame["high"],
                low=frame["low"],
                close=frame["close"],
                increasing_line_color=UP_COLOR,
                decreasing_line_color=DOWN_COLOR,
                name=entry.key.symbol,
            )
        ]
    )
    if recommendation is not None:
        if recommendation.support is not None:
            figure.add_hline(
                y=recommendation.support,
                line_dash="dot",
                line_color=DOWN_COLOR,
                annotation_text="support",
            )
        if recommendation.resistance is not None:
            figure.add_hline(
                y=recommendation.resistance,
                line_dash="dot",
                line_color=UP_COLOR,
                annotation_text="resistance",
            )
    figure.update_layout(
        title=title,
        template="plotly_dark",
        paper_bgcolor=BACKGROUND,
        plot_bgcolor=BACKGROUND,
        xaxis_rangeslider_visible=False,
    )
    return figure


def render_chart_html(
    entry: CacheEntry,
    output_html_path: str,
    recommendation: Recommendation | None = None,
) -> Path:
    """Write the interactive chart to disk and return its path."""
    output = Path(output_html_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    figure = build_figure(entry, recommendation)
    html_parts = [
        "<html><head><meta charset='utf-8'><title>quanta chart</title></head><body>",
        figure.to_html(full_html=False, include_plotlyjs="cdn"),
    ]
    if recommendation is not None:
        html_parts.append(f"<p>{html.escape(recommendation.insight)}</p>")
    html_parts.append("</body></html>")
    output.write_text("".join(html_parts), encoding="utf-8")
    return output
