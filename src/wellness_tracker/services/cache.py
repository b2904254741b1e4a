"""Expiring key-value cache used for profile lookups."""

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol


class Cache(Protocol):
    """Cache interface for simple key-value data."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value with a TTL in seconds."""

    def delete(self, key: str) -> None:
        """Drop a cached value."""


@dataclass
class InMemoryCache(Cache):
    """Process-local cache measured against a monotonic clock.

    Serverless instances do not share it, so a profile saved through one
    instance can stay stale on another until the TTL runs out.
    """

    clock: Callable[[], float] = time.monotonic
    _entries: dict[str, tuple[object, float]] = field(default_factory=dict)

    def get(self, key: str) -> object | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self.clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            self._entries.pop(key, None)
            return
        self._entries[key] = (value, self.clock() + ttl_seconds)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)
