"""Feed cache adapters."""

from feed_ranker.adapters.cache.memory_cache import InMemoryFeedCache

__all__ = ["InMemoryFeedCache"]
