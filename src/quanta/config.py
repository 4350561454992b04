"""Environment and CLI runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Self

from dotenv import load_dotenv

from quanta.data.timeframes import get_timeframe
from quanta.errors import UnknownTimeframe


def parse_symbols(value: str | None, default: list[str] | None = None) -> list[str]:
    """Parse comma-separated symbols, uppercased and deduped."""
    fallback = default or ["NVDA"]
    if not value:
        return list(fallback)
    symbols: list[str] = []
    for item in value.split(","):
        symbol = item.strip().upper()
        if symbol and symbol not in symbols:
            symbols.append(symbol)
    return symbols or list(fallback)


def parse_optional_positive_float(value: str | None, *, field_name: str) -> float | None:
    """Parse optional positive float values from env strings."""
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None
    parsed = float(text)
    if parsed <= 0:
        raise ValueError(f"{field_name} must be positive")
    return parsed


@dataclass(frozen=True)
class Settings:
    """Immutable runtime settings."""

    alpha_vantage_api_key: str = "demo"
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    symbols: list[str] = field(default_factory=lambda: ["NVDA"])
    timeframe: str = "1D"
    request_timeout_seconds: float = 15.0
    max_attempts: int = 5
    backoff_base_seconds: float = 1.0
    backoff_factor: float = 2.0
    synthetic_seed_price: float = 150.0
    synthetic_length: int = 100
    cache_ttl_seconds: float | None = None
    state_db_path: str = "state/quanta_state.db"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Self:
        """Create settings from environment variables."""
        load_dotenv()
        raw = cls(
            alpha_vantage_api_key=str(os.getenv("ALPHAVANTAGE_API_KEY", "demo")).strip(),
            gemini_api_key=str(os.getenv("GEMINI_API_KEY", "")).strip(),
            gemini_model=str(os.getenv("GEMINI_MODEL", "gemini-2.5-flash")).strip(),
            symbols=parse_symbols(os.getenv("SYMBOLS")),
            timeframe=str(os.getenv("TIMEFRAME", "1D")).strip().upper(),
            request_timeout_seconds=float(os.getenv("REQUEST_TIMEOUT_SECONDS", "15")),
            max_attempts=int(os.getenv("MAX_ATTEMPTS", "5")),
            backoff_base_seconds=float(os.getenv("BACKOFF_BASE_SECONDS", "1.0")),
            backoff_factor=float(os.getenv("BACKOFF_FACTOR", "2.0")),
            synthetic_seed_price=float(os.getenv("SYNTHETIC_SEED_PRICE", "150")),
            synthetic_length=int(os.getenv("SYNTHETIC_LENGTH", "100")),
            cache_ttl_seconds=parse_optional_positive_float(
                os.getenv("CACHE_TTL_SECONDS"),
                field_name="cache_ttl_seconds",
            ),
            state_db_path=str(os.getenv("STATE_DB_PATH", "state/quanta_state.db")).strip(),
            log_level=str(os.getenv("LOG_LEVEL", "INFO")).strip().upper(),
        )
        return raw.validate()

    def with_overrides(self, **kwargs: object) -> Self:
        """Return a new settings object with updated values."""
        updated = replace(self, **kwargs)
        return updated.validate()

    def advisor_enabled(self) -> bool:
        return bool(self.gemini_api_key)

    def validate(self) -> Self:
        """Validate settings fields."""
        try:
            get_timeframe(self.timeframe)
        except UnknownTimeframe as exc:
            raise ValueError(str(exc)) from exc
        if not self.symbols:
            raise ValueError("symbols must not be empty")
        if self.request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be positive")
        if self.max_attempts <= 0:
            raise ValueError("max_attempts must be positive")
        if self.backoff_base_seconds < 0:
            raise ValueError("backoff_base_seconds must be non-negative")
        if self.backoff_factor < 1:
            raise ValueError("backoff_factor must be at least 1")
        if self.synthetic_seed_price <= 0:
            raise ValueError("synthetic_seed_price must be positive")
        if self.synthetic_length <= 0:
            raise ValueError("synthetic_length must be positive")
        if self.cache_ttl_seconds is not None and self.cache_ttl_seconds <= 0:
            raise ValueError("cache_ttl_seconds must be positive")
        return self
