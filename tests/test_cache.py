"""Tests for the in-memory cache."""

from datetime import timedelta

from medication_tracker.services.cache import InMemoryCache
from tests.conftest import FixedClock


def test_cache_set_get_delete() -> None:
    cache = InMemoryCache()

    cache.set("medications", [1, 2], ttl_seconds=30)
    assert cache.get("medications") == [1, 2]

    cache.delete("medications")
    assert cache.get("medications") is None
    cache.delete("medications")


def test_cache_expires_entries(clock: FixedClock) -> None:
    cache = InMemoryCache(clock=clock)
    cache.set("medications", [1], ttl_seconds=30)

    clock.now += timedelta(seconds=29)
    assert cache.get("medications") == [1]

    clock.now += timedelta(seconds=1)
    assert cache.get("medications") is None
