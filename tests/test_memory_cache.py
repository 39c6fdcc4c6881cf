"""Tests for the in-memory feed cache."""

import pytest

from feed_ranker.adapters.cache import InMemoryFeedCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.mark.asyncio
async def test_set_and_get() -> None:
    """Test storing and reading a value."""
    cache = InMemoryFeedCache(clock=FakeClock())

    await cache.set("feed:u1", [1, 2, 3], 300)

    assert await cache.get("feed:u1") == [1, 2, 3]
    assert await cache.get("feed:u2") is None


@pytest.mark.asyncio
async def test_entries_expire() -> None:
    """Test that entries vanish once their TTL has passed."""
    clock = FakeClock()
    cache = InMemoryFeedCache(clock=clock)
    await cache.set("feed:u1", "value", 300)

    clock.now += 299
    assert await cache.get("feed:u1") == "value"

    clock.now += 1
    assert await cache.get("feed:u1") is None
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_non_positive_ttl_is_not_stored() -> None:
    """Test that a zero TTL disables caching for the key."""
    cache = InMemoryFeedCache(clock=FakeClock())
    await cache.set("feed:u1", "old", 300)

    await cache.set("feed:u1", "new", 0)

    assert await cache.get("feed:u1") is None


@pytest.mark.asyncio
async def test_delete() -> None:
    """Test invalidating a key, present or not."""
    cache = InMemoryFeedCache(clock=FakeClock())
    await cache.set("feed:u1", "value", 300)

    await cache.delete("feed:u1")
    await cache.delete("feed:missing")

    assert await cache.get("feed:u1") is None


@pytest.mark.asyncio
async def test_expired_entries_are_pruned_on_write() -> None:
    """Test that stale keys of other users don't pile up."""
    clock = FakeClock()
    cache = InMemoryFeedCache(clock=clock)
    await cache.set("feed:u1", "a", 60)
    await cache.set("feed:u2", "b", 600)

    clock.now += 120
    await cache.set("feed:u3", "c", 60)

    assert len(cache) == 2
    assert await cache.get("feed:u2") == "b"

