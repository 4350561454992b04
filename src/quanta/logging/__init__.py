"""Logging and chart report helpers."""

from .chart import build_figure, render_chart_html
from .logger import TerminalLogger, setup_logging

__all__ = ["TerminalLogger", "build_figure", "render_chart_html", "setup_logging"]
