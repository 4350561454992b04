"""Static catalog mapping timeframe ids to upstream query shapes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from quanta.domain.models import TimeframeId
from quanta.errors import UnknownTimeframe


@dataclass(frozen=True)
class Timeframe:
    """Upstream query shape and display bucket for one timeframe."""

    id: TimeframeId
    function: str
    series_field: str
    bucket: timedelta
    label: str
    interval: str | None = None
    limit: int | None = None

    @property
    def intraday(self) -> bool:
        return self.interval is not None

    def query_params(self, symbol: str, api_key: str) -> dict[str, str]:
        params = {
            "function": self.function,
            "symbol": symbol.strip().upper(),
            "outputsize": "compact",
            "apikey": api_key,
        }
        if self.interval is not None:
            params["interval"] = self.interval
        return params


_CATALOG: dict[TimeframeId, Timeframe] = {
    TimeframeId.INTRADAY: Timeframe(
        id=TimeframeId.INTRADAY,
        function="TIME_SERIES_INTRADAY",
        series_field="Time Series (5min)",
        bucket=timedelta(minutes=5),
        label="1 Day",
        interval="5min",
    ),
    TimeframeId.WEEK: Timeframe(
        id=TimeframeId.WEEK,
        function="TIME_SERIES_DAILY",
        series_field="Time Series (Daily)",
        bucket=timedelta(days=1),
        label="1 Week",
        limit=7,
    ),
    TimeframeId.MONTH: Timeframe(
        id=TimeframeId.MONTH,
        function="TIME_SERIES_DAILY",
        series_field="Time Series (Daily)",
        bucket=timedelta(days=1),
        label="1 Month",
        limit=30,
    ),
    TimeframeId.YEAR: Timeframe(
        id=TimeframeId.YEAR,
        function="TIME_SERIES_WEEKLY",
        series_field="Weekly Time Series",
        bucket=timedelta(days=1),
        label="1 Year",
        limit=52,
    ),
}


def get_timeframe(identifier: TimeframeId | Timeframe | str) -> Timeframe:
    """Look up a timeframe, raising UnknownTimeframe outside the fixed set."""
    if isinstance(identifier, Timeframe):
        return identifier
    if not isinstance(identifier, str):
        raise UnknownTimeframe(f"Unknown timeframe: {identifier!r}")
    candidate = identifier.strip().upper()
    try:
        return _CATALOG[TimeframeId(candidate)]
    except ValueError as exc:
        supported = ", ".join(item.value for item in TimeframeId)
        raise UnknownTimeframe(
            f"Unknown timeframe '{identifier}'. Supported: {supported}"
        ) from exc


def available_timeframes() -> list[Timeframe]:
    """Return the catalog in display order."""
    return [_CATALOG[item] for item in TimeframeId]
