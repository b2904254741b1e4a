"""Tests for the profile cache."""

from wellness_tracker.services.cache import InMemoryCache


class _Clock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def test_cache_expires_entries() -> None:
    clock = _Clock()
    cache = InMemoryCache(clock=clock)

    cache.set("profile:1", "Ana", ttl_seconds=60)
    clock.now += 59
    fresh = cache.get("profile:1")
    clock.now += 1
    expired = cache.get("profile:1")

    assert fresh == "Ana"
    assert expired is None


def test_cache_delete_and_non_positive_ttl() -> None:
    cache = InMemoryCache()

    cache.set("a", 1, ttl_seconds=60)
    cache.delete("a")
    cache.delete("missing")
    cache.set("b", 2, ttl_seconds=0)

    assert cache.get("a") is None
    assert cache.get("b") is None
