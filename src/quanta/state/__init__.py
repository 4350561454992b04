"""Persisted terminal state."""

from .watchlist import DEFAULT_FAVORITES, SqliteWatchlistStore, WatchlistStore

__all__ = ["DEFAULT_FAVORITES", "SqliteWatchlistStore", "WatchlistStore"]
