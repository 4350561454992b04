"""SQLite-backed favorites list stored under a fixed storage key."""

from __future__ import annotations

import json
import sqlite3
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

DEFAULT_STORAGE_KEY = "quanta.favorites"
DEFAULT_FAVORITES = ["AAPL", "TSLA", "NVDA", "MSFT", "GOOGL"]


class WatchlistStore(Protocol):
    """Persistence API for the favorites list."""

    def load(self) -> list[str]:
        """Return the stored symbols in order."""

    def save(self, symbols: list[str]) -> list[str]:
        """Rewrite the stored list and return it."""

    def add(self, symbol: str) -> list[str]:
        """Append a symbol when absent and return the new list."""

    def remove(self, symbol: str) -> list[str]:
        """Drop a symbol and return the new list."""

    def close(self) -> None:
        """Close persistence resources."""


def normalize_symbols(symbols: list[str]) -> list[str]:
    """Uppercase, strip and dedupe symbols while preserving order."""
    deduped: list[str] = []
    seen: set[str] = set()
    for symbol in symbols:
        normalized = symbol.strip().upper()
        if not normalized or normalized in seen:
            continue
        seen.add(normalized)
        deduped.append(normalized)
    return deduped


class SqliteWatchlistStore:
    """Flat ordered symbol list persisted as one JSON row in a key/value table."""

    def __init__(
        self,
        db_path: str,
        storage_key: str = DEFAULT_STORAGE_KEY,
        defaults: list[str] | None = None,
    ) -> None:
        path = Path(db_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.storage_key = storage_key
        self.defaults = list(DEFAULT_FAVORITES if defaults is None else defaults)
        self.connection = sqlite3.connect(path)
        self.connection.row_factory = sqlite3.Row
        self._initialize_schema()

    def load(self) -> list[str]:
        row = self.connection.execute(
            "SELECT value FROM kv_store WHERE key = ?",
            (self.storage_key,),
        ).fetchone()
        if row is None:
            return list(self.defaults)
        try:
            stored = json.loads(row["value"])
        except ValueError:
            return list(self.defaults)
        if not isinstance(stored, list):
            return list(self.defaults)
        return normalize_symbols([str(item) for item in stored])

    def save(self, symbols: list[str]) -> list[str]:
        normalized = normalize_symbols(symbols)
        self.connection.execute(
            """
            INSERT OR REPLACE INTO kv_store(key, value, updated_ts)
            VALUES(?, ?, ?)
            """,
            (self.storage_key, json.dumps(normalized), self._utc_now()),
        )
        self.connection.commit()
        return normalized

    def add(self, symbol: str) -> list[str]:
        return self.save([*self.load(), symbol])

    def remove(self, symbol: str) -> list[str]:
        target = symbol.strip().upper()
        return self.save([item for item in self.load() if item != target])

    def close(self) -> None:
        self.connection.close()

    def _initialize_schema(self) -> None:
        self.connection.execute(
            """
            CREATE TABLE IF NOT EXISTS kv_store(
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_ts TEXT NOT NULL
            )
            """
        )
        self.connection.commit()

    @staticmethod
    def _utc_now() -> str:
        return datetime.now(tz=UTC).isoformat()
