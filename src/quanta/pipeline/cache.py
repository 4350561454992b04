"""Process-wide in-memory result cache keyed by (symbol, timeframe)."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from quanta.domain.models import CacheEntry, RequestKey


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class MarketCache:
    """Explicit get/put cache owned by one coordinator for the process lifetime.

    Entries never expire unless ``ttl_seconds`` is set.
    """

    def __init__(
        self,
        ttl_seconds: float | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if ttl_seconds is not None and ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl = None if ttl_seconds is None else timedelta(seconds=ttl_seconds)
        self.clock = clock or _utc_now
        self._entries: dict[RequestKey, CacheEntry] = {}

    def get(self, key: RequestKey) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self.ttl is not None and self.clock() - entry.inserted_at >= self.ttl:
            del self._entries[key]
            return None
        return entry

    def put(self, entry: CacheEntry) -> None:
        self._entries[entry.key] = entry

    def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> list[RequestKey]:
        return list(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, RequestKey) and self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)
