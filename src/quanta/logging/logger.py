"""Logging setup and the concise human-readable terminal logger."""

from __future__ import annotations

import logging

from quanta.domain.models import CacheEntry, Recommendation

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(log_level: str = "INFO", log_file: str | None = None) -> logging.Logger:
    """Configure and return the package logger.

    Logs are written to console, plus an optional file if `log_file` is set.
    """
    logger = logging.getLogger("quanta")
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    logger.propagate = False

    if logger.handlers:
        return logger

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


class TerminalLogger:
    """Console logger with fixed line types."""

    def __init__(self, level: str = "INFO") -> None:
        self._logger = logging.getLogger("quanta.terminal")
        self._logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self._logger.propagate = False
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s | %(message)s", DATE_FORMAT)
            handler.setFormatter(formatter)
            self._logger.addHandler(handler)

    def quote(self, entry: CacheEntry) -> None:
        shown = entry.stats.display()
        self._logger.info(
            "quote | %s | %s | $%s | %s (%s) | high %s | low %s | vol %s | %s",
            entry.key.symbol,
            entry.key.timeframe_id.value,
            shown["price"],
            shown["change"],
            shown["pct"],
            shown["high"],
            shown["low"],
            shown["volume"],
            "SIMULATED" if entry.simulated else "LIVE",
        )

    def advice(self, symbol: str, recommendation: Recommendation) -> None:
        parts = [
            f"advice | {symbol} | {recommendation.verdict.value}",
            f"score {recommendation.score}",
        ]
        if recommendation.support is not None and recommendation.resistance is not None:
            parts.append(f"range {recommendation.support:,.2f}-{recommendation.resistance:,.2f}")
        parts.append(recommendation.insight)
        self._logger.info(" | ".join(parts))

    def favorites(self, symbols: list[str]) -> None:
        self._logger.info("favorites | %s", ", ".join(symbols) if symbols else "(empty)")

    def chart(self, path: str) -> None:
        self._logger.info("chart | %s", path)

    def error(self, message: str) -> None:
        self._logger.error("error | %s", message)
