"""Snapshot cache abstractions."""

import time
from dataclasses import dataclass, field
from typing import Protocol


class Cache(Protocol):
    """Cache interface for learned baseline snapshots."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present and fresh."""

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a value for `ttl_seconds`."""

    def invalidate(self, prefix: str) -> None:
        """Drop every entry whose key starts with `prefix`."""


@dataclass
class InMemoryCache(Cache):
    """Process-local cache keyed by string, expiring on a monotonic clock."""

    _entries: dict[str, tuple[object, float]] = field(default_factory=dict)

    def get(self, key: str) -> object | None:
        """Return a cached value unless it has expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, deadline = entry
        if time.monotonic() >= deadline:
            self._entries.pop(key, None)
            return None
        return value

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a value with a TTL."""
        self._entries[key] = (value, time.monotonic() + ttl_seconds)

    def invalidate(self, prefix: str) -> None:
        """Drop entries under a key prefix."""
        for key in [key for key in self._entries if key.startswith(prefix)]:
            self._entries.pop(key, None)
