from __future__ import annotations

import pytest

from quanta.config import Settings, parse_symbols

ENV_KEYS = [
    "ALPHAVANTAGE_API_KEY",
    "GEMINI_API_KEY",
    "GEMINI_MODEL",
    "SYMBOLS",
    "TIMEFRAME",
    "REQUEST_TIMEOUT_SECONDS",
    "MAX_ATTEMPTS",
    "BACKOFF_BASE_SECONDS",
    "BACKOFF_FACTOR",
    "SYNTHETIC_SEED_PRICE",
    "SYNTHETIC_LENGTH",
    "CACHE_TTL_SECONDS",
    "STATE_DB_PATH",
    "LOG_LEVEL",
]


def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("quanta.config.load_dotenv", lambda *args, **kwargs: None)
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_follow_baseline_policy(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)

    settings = Settings.from_env()

    assert settings.alpha_vantage_api_key == "demo"
    assert settings.symbols == ["NVDA"]
    assert settings.timeframe == "1D"
    assert settings.max_attempts == 5
    assert settings.backoff_base_seconds == 1.0
    assert settings.backoff_factor == 2.0
    assert settings.cache_ttl_seconds is None
    assert settings.advisor_enabled() is False


def test_environment_values_are_parsed(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("ALPHAVANTAGE_API_KEY", " av-key ")
    monkeypatch.setenv("GEMINI_API_KEY", "g-key")
    monkeypatch.setenv("SYMBOLS", "aapl, msft,,AAPL")
    monkeypatch.setenv("TIMEFRAME", "1y")
    monkeypatch.setenv("MAX_ATTEMPTS", "3")
    monkeypatch.setenv("CACHE_TTL_SECONDS", "300")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.alpha_vantage_api_key == "av-key"
    assert settings.advisor_enabled() is True
    assert settings.symbols == ["AAPL", "MSFT"]
    assert settings.timeframe == "1Y"
    assert settings.max_attempts == 3
    assert settings.cache_ttl_seconds == 300.0
    assert settings.log_level == "DEBUG"


def test_unknown_timeframe_is_a_configuration_error(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("TIMEFRAME", "5Y")

    with pytest.raises(ValueError, match="Unknown timeframe"):
        Settings.from_env()


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"max_attempts": 0}, "max_attempts"),
        ({"backoff_factor": 0.5}, "backoff_factor"),
        ({"backoff_base_seconds": -1.0}, "backoff_base_seconds"),
        ({"synthetic_seed_price": 0.0}, "synthetic_seed_price"),
        ({"synthetic_length": 0}, "synthetic_length"),
        ({"cache_ttl_seconds": -5.0}, "cache_ttl_seconds"),
        ({"symbols": []}, "symbols"),
    ],
)
def test_with_overrides_validates(overrides: dict[str, object], message: str) -> None:
    with pytest.raises(ValueError, match=message):
        Settings().with_overrides(**overrides)


def test_parse_symbols_falls_back_to_default() -> None:
    assert parse_symbols(None) == ["NVDA"]
    assert parse_symbols(" , ", default=["SPY"]) == ["SPY"]
