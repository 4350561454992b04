"""Strict validation and normalization of Alpha Vantage time-series payloads."""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

from quanta.data.timeframes import Timeframe
from quanta.domain.models import Bar, PriceSeries
from quanta.errors import UpstreamUnavailable

RATE_LIMIT_FIELDS = ("Note", "Information")
ERROR_FIELD = "Error Message"
DEFAULT_INTRADAY_TZ = "US/Eastern"

PRICE_COLUMNS = {
    "1. open": "open",
    "2. high": "high",
    "3. low": "low",
    "4. close": "close",
}
VOLUME_COLUMN = "5. volume"


def check_provider_signals(payload: Any, symbol: str) -> None:
    """Fail on non-object payloads and on rate-limit or error notices."""
    if not isinstance(payload, dict):
        raise UpstreamUnavailable(
            f"Alpha Vantage returned a non-object payload for {symbol}"
        )
    for field_name in RATE_LIMIT_FIELDS:
        if field_name in payload:
            raise UpstreamUnavailable(
                f"Alpha Vantage rate limit reached: {payload[field_name]}"
            )
    if ERROR_FIELD in payload:
        raise UpstreamUnavailable(
            f"Alpha Vantage returned an error: {payload[ERROR_FIELD]}"
        )


def parse_series(payload: Any, symbol: str, timeframe: Timeframe) -> PriceSeries:
    """Validate a payload for one timeframe category and return canonical bars.

    Any shape mismatch raises UpstreamUnavailable; nothing partial is returned.
    """
    check_provider_signals(payload, symbol)
    raw_series = payload.get(timeframe.series_field)
    if not isinstance(raw_series, dict) or not raw_series:
        raise UpstreamUnavailable(
            f"Alpha Vantage response missing '{timeframe.series_field}' for {symbol}"
        )
    if not all(isinstance(record, dict) for record in raw_series.values()):
        raise UpstreamUnavailable(f"Alpha Vantage records for {symbol} are not objects")

    frame = pd.DataFrame.from_dict(raw_series, orient="index")
    missing_cols = [col for col in PRICE_COLUMNS if col not in frame.columns]
    if missing_cols:
        raise UpstreamUnavailable(f"Data for {symbol} missing required columns: {missing_cols}")

    columns = list(PRICE_COLUMNS)
    rename_map = dict(PRICE_COLUMNS)
    if VOLUME_COLUMN in frame.columns:
        columns.append(VOLUME_COLUMN)
        rename_map[VOLUME_COLUMN] = "volume"
    raw = frame[columns].rename(columns=rename_map)
    frame = raw.apply(pd.to_numeric, errors="coerce")
    prices = frame[["open", "high", "low", "close"]].to_numpy(dtype=float)
    if np.isnan(prices).any():
        raise UpstreamUnavailable(f"Data for {symbol} contains non-numeric prices")
    if not np.isfinite(prices).all():
        raise UpstreamUnavailable(f"Data for {symbol} contains non-finite prices")
    if "volume" in frame.columns:
        # A missing volume is allowed; a present but unreadable one is not.
        volume = frame["volume"]
        if (volume.isna() & raw["volume"].notna()).any():
            raise UpstreamUnavailable(f"Data for {symbol} contains non-numeric volume")
        if np.isinf(volume.to_numpy(dtype=float)).any():
            raise UpstreamUnavailable(f"Data for {symbol} contains non-finite volume")

    frame.index = _parse_index(frame.index, payload, symbol, timeframe)
    frame = frame.sort_index()
    frame = frame[~frame.index.duplicated(keep="last")]
    if timeframe.limit is not None:
        frame = frame.tail(timeframe.limit)

    try:
        bars = tuple(
            Bar(
                time=timestamp.to_pydatetime(),
                open=float(row.open),
                high=float(row.high),
                low=float(row.low),
                close=float(row.close),
                volume=_optional_float(getattr(row, "volume", None)),
            )
            for timestamp, row in zip(frame.index, frame.itertuples(index=False))
        )
        return PriceSeries(symbol=symbol.strip().upper(), timeframe_id=timeframe.id, bars=bars)
    except ValueError as exc:
        raise UpstreamUnavailable(f"Data for {symbol} failed validation: {exc}") from exc


def _parse_index(
    index: pd.Index,
    payload: dict[str, Any],
    symbol: str,
    timeframe: Timeframe,
) -> pd.DatetimeIndex:
    try:
        parsed = pd.to_datetime(index, errors="raise")
    except (ValueError, TypeError) as exc:
        raise UpstreamUnavailable(f"Data for {symbol} has unparseable timestamps") from exc

    if parsed.tz is not None:
        return parsed.tz_convert("UTC")
    if timeframe.intraday:
        meta = payload.get("Meta Data")
        zone = DEFAULT_INTRADAY_TZ
        if isinstance(meta, dict) and isinstance(meta.get("6. Time Zone"), str):
            zone = meta["6. Time Zone"]
        try:
            localized = parsed.tz_localize(zone, ambiguous="NaT", nonexistent="NaT")
        except (KeyError, ValueError, TypeError) as exc:
            raise UpstreamUnavailable(f"Data for {symbol} has unknown time zone {zone}") from exc
        if localized.isna().any():
            raise UpstreamUnavailable(f"Data for {symbol} has ambiguous local timestamps")
        return localized.tz_convert("UTC")
    return parsed.normalize().tz_localize("UTC")


def _optional_float(value: Any) -> float | None:
    if value is None or pd.isna(value):
        return None
    return float(value)
