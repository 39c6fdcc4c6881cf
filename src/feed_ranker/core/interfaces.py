"""Core interfaces for adapters."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from feed_ranker.core.entities import (
    ContentInteraction,
    ContentItem,
    ContentSource,
    FeedPreferences,
    FilterConfiguration,
)


class FeedRepository(ABC):
    """Interface for loading everything a feed is generated from."""

    @abstractmethod
    async def get_sources(self, user_id: str) -> list[ContentSource]:
        """Get the user's sources, muted ones excluded."""
        pass

    @abstractmethod
    async def get_content(self, sources: list[ContentSource], limit: int) -> list[ContentItem]:
        """Get content of the given sources, newest first."""
        pass

    @abstractmethod
    async def get_interactions(self, user_id: str) -> list[ContentInteraction]:
        """Get the user's interaction log."""
        pass

    @abstractmethod
    async def get_preferences(self, user_id: str) -> Optional[FeedPreferences]:
        """Get saved feed preferences, None if the user has none."""
        pass

    @abstractmethod
    async def get_filter_configuration(self, user_id: str) -> FilterConfiguration:
        """Get the user's keyword and duration filters."""
        pass


class FeedCache(ABC):
    """Interface for caching generated feeds."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return the cached value or None."""
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Store a value for ``ttl_seconds``."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Drop a cached value."""
        pass
