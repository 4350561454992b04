"""Core market-data domain models."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

import pandas as pd


class TimeframeId(StrEnum):
    """Supported chart timeframes."""

    INTRADAY = "1D"
    WEEK = "1W"
    MONTH = "1M"
    YEAR = "1Y"


class Verdict(StrEnum):
    """Advisory recommendation outcomes."""

    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


@dataclass(frozen=True)
class Bar:
    """One OHLC observation for a time bucket."""

    time: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float | None = None

    def __post_init__(self) -> None:
        if self.low > min(self.open, self.close):
            raise ValueError(f"bar low {self.low} above open/close at {self.time}")
        if self.high < max(self.open, self.close):
            raise ValueError(f"bar high {self.high} below open/close at {self.time}")

    def chart_time(self, intraday: bool) -> int | str:
        """Epoch seconds for intraday buckets, ISO date otherwise."""
        if intraday:
            return int(self.time.timestamp())
        return self.time.date().isoformat()

    def to_record(self, intraday: bool = False) -> dict[str, Any]:
        record: dict[str, Any] = {
            "time": self.chart_time(intraday),
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
        }
        if self.volume is not None:
            record["volume"] = self.volume
        return record


@dataclass(frozen=True)
class PriceSeries:
    """Ordered, non-empty bar sequence for one symbol and timeframe."""

    symbol: str
    timeframe_id: TimeframeId
    bars: tuple[Bar, ...]

    def __post_init__(self) -> None:
        if not self.bars:
            raise ValueError(f"{self.symbol}: series must contain at least one bar")
        for previous, current in zip(self.bars, self.bars[1:]):
            if current.time <= previous.time:
                raise ValueError(
                    f"{self.symbol}: bar times must be strictly increasing "
                    f"({previous.time} -> {current.time})"
                )

    def __len__(self) -> int:
        return len(self.bars)

    def __iter__(self) -> Iterator[Bar]:
        return iter(self.bars)

    def __getitem__(self, index: int) -> Bar:
        return self.bars[index]

    @property
    def last(self) -> Bar:
        return self.bars[-1]

    @property
    def intraday(self) -> bool:
        return self.timeframe_id == TimeframeId.INTRADAY

    def closes(self) -> list[float]:
        return [bar.close for bar in self.bars]

    def to_frame(self) -> pd.DataFrame:
        """Return an OHLCV DataFrame indexed by bar time."""
        frame = pd.DataFrame(
            {
                "open": [bar.open for bar in self.bars],
                "high": [bar.high for bar in self.bars],
                "low": [bar.low for bar in self.bars],
                "close": [bar.close for bar in self.bars],
                "volume": [bar.volume for bar in self.bars],
            },
            index=pd.DatetimeIndex([bar.time for bar in self.bars], name="time"),
        )
        return frame


@dataclass(frozen=True)
class RequestKey:
    """Dedupe token and cache key for a logical data request."""

    symbol: str
    timeframe_id: TimeframeId

    @classmethod
    def of(cls, symbol: str, timeframe_id: TimeframeId) -> RequestKey:
        normalized = symbol.strip().upper()
        if not normalized:
            raise ValueError("symbol must not be empty")
        return cls(symbol=normalized, timeframe_id=TimeframeId(timeframe_id))

    def __str__(self) -> str:
        return f"{self.symbol}-{self.timeframe_id.value}"


@dataclass(frozen=True)
class Stats:
    """Summary statistics derived from a series."""

    price: float
    change: float
    percent_change: float
    high: float
    low: float
    volume: float | None = None

    def display(self) -> dict[str, str]:
        """Formatted strings for the ticker bar."""
        sign = "+" if self.change >= 0 else ""
        volume = "N/A" if self.volume is None else f"{self.volume:,.0f}"
        return {
            "price": f"{self.price:.2f}",
            "change": f"{sign}{self.change:.2f}",
            "pct": f"{sign}{self.percent_change:.2f}%",
            "high": f"{self.high:.2f}",
            "low": f"{self.low:.2f}",
            "volume": volume,
        }

    def to_record(self) -> dict[str, Any]:
        return {
            "price": self.price,
            "change": self.change,
            "percent_change": self.percent_change,
            "high": self.high,
            "low": self.low,
            "volume": self.volume,
        }


@dataclass(frozen=True)
class Recommendation:
    """Advisory verdict for one symbol."""

    verdict: Verdict
    score: int
    insight: str
    support: float | None = None
    resistance: float | None = None
    source: str = "heuristic"

    def __post_init__(self) -> None:
        if not 0 <= self.score <= 100:
            raise ValueError(f"score must be between 0 and 100, got {self.score}")


@dataclass(frozen=True)
class CacheEntry:
    """Resolved series, stats and provenance stored under one request key."""

    key: RequestKey
    series: PriceSeries
    stats: Stats
    simulated: bool
    inserted_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    @property
    def provenance(self) -> str:
        return "simulated" if self.simulated else "live"

    def to_payload(self) -> dict[str, Any]:
        """Caller-facing view: series, stats and the simulated flag."""
        intraday = self.series.intraday
        return {
            "series": [bar.to_record(intraday) for bar in self.series],
            "stats": self.stats.to_record(),
            "simulated": self.simulated,
        }
