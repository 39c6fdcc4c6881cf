"""Business logic use cases."""

import asyncio
import logging
from datetime import datetime
from typing import Optional

from feed_ranker.adapters.serialization import feed_item_to_dict
from feed_ranker.config import Settings
from feed_ranker.core import (
    FeedCache,
    FeedGenerator,
    FeedItem,
    FeedPreferences,
    FeedRepository,
    FilterEngine,
    build_rules,
)

logger = logging.getLogger(__name__)


def feed_cache_key(user_id: str) -> str:
    return f"feed:{user_id}"


class FeedService:
    """Load a user's data, filter it and generate their feed."""

    def __init__(
        self,
        repository: FeedRepository,
        cache: Optional[FeedCache] = None,
        generator: Optional[FeedGenerator] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.repository = repository
        self.cache = cache
        self.settings = settings or Settings()
        self.generator = generator or FeedGenerator(self.settings.feed)

    async def get_user_feed(self, user_id: str) -> list[dict]:
        """Return the serialized feed, served from cache when possible."""
        key = feed_cache_key(user_id)

        if self.cache is not None:
            cached = await self.cache.get(key)
            if cached is not None:
                logger.info("Feed cache hit for %s", user_id)
                return cached

        logger.info("Generating fresh feed for %s", user_id)
        feed = [feed_item_to_dict(item) for item in await self.generate_feed(user_id)]

        if self.cache is not None:
            await self.cache.set(key, feed, self.settings.cache_ttl_seconds)

        return feed

    async def generate_feed(self, user_id: str, now: Optional[datetime] = None) -> list[FeedItem]:
        """Run the whole pipeline for one user, bypassing the cache."""
        sources, filter_config, preferences, interactions = await asyncio.gather(
            self.repository.get_sources(user_id),
            self.repository.get_filter_configuration(user_id),
            self.repository.get_preferences(user_id),
            self.repository.get_interactions(user_id),
        )

        if not sources:
            logger.info("No sources configured for %s, returning empty feed", user_id)
            return []

        content = await self.repository.get_content(sources, self.settings.content_fetch_limit)
        if not content:
            logger.info("No content available for %s, returning empty feed", user_id)
            return []

        rules = build_rules(filter_config)
        logger.info(
            "Filter configuration loaded for %s: %d keywords, duration filter %s, %d rules",
            user_id,
            len(filter_config.keywords),
            "active" if filter_config.duration_range else "none",
            len(rules),
        )

        filtered = FilterEngine(rules).evaluate_batch(content)
        logger.info("Content filtered for %s: %d of %d kept", user_id, len(filtered), len(content))

        feed = self.generator.generate(
            sources,
            filtered,
            preferences or self._default_preferences(user_id),
            interactions,
            now=now,
        )
        feed = feed[:self.settings.max_feed_size]

        logger.info("Feed generated for %s: %d items", user_id, len(feed))
        return feed

    async def refresh_feed(self, user_id: str) -> None:
        """Drop the cached feed, e.g. after new interactions or preference changes."""
        logger.info("Feed refresh requested for %s", user_id)
        if self.cache is not None:
            await self.cache.delete(feed_cache_key(user_id))

    def _default_preferences(self, user_id: str) -> FeedPreferences:
        return FeedPreferences(
            user_id=user_id,
            backlog_ratio=self.settings.default_backlog_ratio,
            max_consecutive_from_source=self.settings.default_max_consecutive,
        )
