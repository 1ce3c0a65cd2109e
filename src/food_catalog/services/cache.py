"""Process-lifetime cache for raw data-source responses."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Cache(Protocol):
    """Cache interface for simple key-value data."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value with a TTL in seconds."""


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class _CacheEntry:
    value: object
    stored_at: datetime
    ttl: timedelta

    def is_fresh(self, now: datetime) -> bool:
        return now - self.stored_at < self.ttl


@dataclass
class InMemoryCache(Cache):
    """Unbounded in-memory cache with lazy, read-time expiry."""

    clock: Callable[[], datetime] = utc_now
    _entries: dict[str, _CacheEntry] = field(default_factory=dict)

    def get(self, key: str) -> object | None:
        """Return a cached value if it hasn't expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not entry.is_fresh(self.clock()):
            return None
        return entry.value

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value stamped with the current time."""
        self._entries[key] = _CacheEntry(
            value=value,
            stored_at=self.clock(),
            ttl=timedelta(seconds=ttl_seconds),
        )

    def clear(self) -> None:
        """Drop every cached entry."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
