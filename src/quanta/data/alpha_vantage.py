"""Alpha Vantage HTTP client for chart series with synthetic fallback."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import requests

from quanta.data.base import FetchResult, LiveResult, SimulatedResult
from quanta.data.schema import check_provider_signals, parse_series
from quanta.data.synthetic import SyntheticSeriesGenerator
from quanta.data.timeframes import Timeframe, get_timeframe
from quanta.domain.models import PriceSeries, TimeframeId
from quanta.errors import UpstreamUnavailable

Sleep = Callable[[float], Awaitable[None]]


class AlphaVantageClient:
    """Alpha Vantage client with exponential backoff and a simulated fallback."""

    BASE_URL = "https://www.alphavantage.co/query"

    def __init__(
        self,
        api_key: str,
        generator: SyntheticSeriesGenerator | None = None,
        session: requests.Session | None = None,
        timeout: float = 15,
        max_attempts: int = 5,
        base_delay: float = 1.0,
        backoff_factor: float = 2.0,
        seed_price: float = 150.0,
        synthetic_length: int = 100,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if max_attempts <= 0:
            raise ValueError("max_attempts must be positive")
        self.api_key = api_key
        self.generator = generator or SyntheticSeriesGenerator()
        # An injected session is shared by every worker thread and must be thread-safe.
        self.session = session
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.backoff_factor = backoff_factor
        self.seed_price = seed_price
        self.synthetic_length = synthetic_length
        self.sleep = sleep
        self.logger = logging.getLogger("quanta.data.alpha_vantage")

    async def fetch(
        self,
        symbol: str,
        timeframe: TimeframeId | Timeframe | str,
    ) -> FetchResult:
        """Return a live series, or a simulated one when the upstream is unavailable."""
        frame = get_timeframe(timeframe)
        try:
            series = await self.fetch_live(symbol, frame)
        except UpstreamUnavailable as exc:
            self.logger.warning(
                "Live data unavailable for %s %s, using simulated series: %s",
                symbol.upper(),
                frame.id.value,
                exc,
            )
            simulated = self.generator.generate(
                self.seed_price,
                frame,
                length=self.synthetic_length,
                symbol=symbol,
            )
            return SimulatedResult(series=simulated, reason=str(exc))
        return LiveResult(series=series)

    async def fetch_live(self, symbol: str, timeframe: Timeframe) -> PriceSeries:
        """Fetch and normalize a live series, raising UpstreamUnavailable on any fault."""
        params = timeframe.query_params(symbol, self.api_key)
        payload = await self._request_with_retry(params=params)
        return parse_series(payload, symbol, timeframe)

    def backoff_delay(self, attempt: int) -> float:
        """Seconds to wait after the given failed attempt (1-based)."""
        return self.base_delay * self.backoff_factor ** (attempt - 1)

    async def _request_with_retry(self, params: dict[str, str]) -> dict[str, Any]:
        """GET with exponential backoff on transport failures and non-2xx statuses."""
        last_error = "no attempts made"
        for attempt in range(1, self.max_attempts + 1):
            try:
                payload = await asyncio.to_thread(self._get_json, params)
            except requests.RequestException as exc:
                last_error = str(exc)
                if attempt == self.max_attempts:
                    break
                delay = self.backoff_delay(attempt)
                self.logger.warning(
                    "Alpha Vantage request failed (attempt %s/%s). Retrying in %ss.",
                    attempt,
                    self.max_attempts,
                    delay,
                )
                await self.sleep(delay)
                continue

            # Rate-limit and error notices are terminal for this fetch.
            check_provider_signals(payload, params["symbol"])
            return payload

        raise UpstreamUnavailable(
            f"Failed to fetch data from Alpha Vantage after {self.max_attempts} attempts: "
            f"{last_error}"
        )

    def _get_json(self, params: dict[str, str]) -> Any:
        if self.session is not None:
            response = self.session.get(self.BASE_URL, params=params, timeout=self.timeout)
        else:
            # requests.Session is not thread-safe; each worker thread gets its own.
            with requests.Session() as session:
                response = session.get(self.BASE_URL, params=params, timeout=self.timeout)
        response.raise_for_status()
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamUnavailable("Alpha Vantage returned a non-JSON body") from exc
