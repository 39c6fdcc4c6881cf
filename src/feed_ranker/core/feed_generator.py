"""Feed generation: turns a user's content pool into one ordered feed."""

import logging
import math
import random
from datetime import datetime, timedelta
from typing import Callable, Optional, Sequence, TypeVar

from feed_ranker.config import FeedConfig
from feed_ranker.core.backlog import BacklogMixer
from feed_ranker.core.diversity import DiversityEnforcer
from feed_ranker.core.entities import (
    DISQUALIFYING_INTERACTIONS,
    ContentInteraction,
    ContentItem,
    ContentSource,
    FeedItem,
    FeedPreferences,
    InteractionType,
    ensure_utc,
    interaction_state_for,
    utcnow,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Picks k of the given items without replacement
Chooser = Callable[[Sequence[T], int], list[T]]

UNKNOWN_SOURCE_NAME = "Unknown"


def random_chooser(items: Sequence[T], k: int) -> list[T]:
    return random.sample(list(items), k)


class FeedGenerator:
    """Build a user's feed from already filtered content.

    The pipeline, in order:

    1. drop items the user watched, saved, dismissed or blocked
    2. label the rest new or backlog by publication age
    3. pick new and backlog items according to the backlog ratio
    4. bring back a bounded number of "not now" items
    5. break up long runs from a single source
    6. attach source names and interaction state, number the positions
    7. cut the feed to its maximum size

    The generator keeps no state between calls. The only randomness is the
    injected ``chooser`` used to pick which deferred items come back.
    """

    def __init__(
        self,
        config: Optional[FeedConfig] = None,
        chooser: Optional[Chooser] = None,
        diversity_enforcer: Optional[DiversityEnforcer] = None,
        backlog_mixer: Optional[BacklogMixer] = None,
    ) -> None:
        self.config = (config or FeedConfig()).validated()
        self.chooser = chooser or random_chooser
        self.diversity_enforcer = diversity_enforcer or DiversityEnforcer()
        self.backlog_mixer = backlog_mixer or BacklogMixer()

    def generate(
        self,
        sources: list[ContentSource],
        content_pool: list[ContentItem],
        preferences: FeedPreferences,
        interactions: list[ContentInteraction],
        now: Optional[datetime] = None,
    ) -> list[FeedItem]:
        if not sources or not content_pool:
            return []

        now = ensure_utc(now or utcnow())
        cutoff = now - timedelta(days=self.config.recency_window_days)
        capacity = self.config.max_feed_size
        backlog_ratio = min(1.0, max(0.0, preferences.backlog_ratio))
        max_consecutive = max(1, preferences.max_consecutive_from_source)

        # 1. Disqualification by interaction history
        disqualified = self._disqualified_ids(interactions)
        deferred_ids = {
            i.content_id for i in interactions
            if i.type == InteractionType.NOT_NOW and i.content_id not in disqualified
        }
        eligible = [
            item for item in self._unique(content_pool)
            if item.id not in disqualified
        ]

        # 2. Age categorization, deferred items included
        new = [item for item in eligible if self._is_new(item, cutoff)]
        backlog = [item for item in eligible if not self._is_new(item, cutoff)]

        # 3. Backlog ratio mixing
        mixed = self.backlog_mixer.mix(new, backlog, backlog_ratio, capacity)

        # 4. Resurfacing of deferred items the mix left out
        mixed_ids = {item.id for item in mixed}
        deferred = [
            item for item in eligible
            if item.id in deferred_ids and item.id not in mixed_ids
        ]
        with_returning, resurfaced = self._resurface(mixed, deferred)

        # 5. Diversity
        diversified = self.diversity_enforcer.enforce(with_returning, max_consecutive)

        # 6. Enrichment and positions
        display_names = self._display_names(sources)
        latest = self._latest_interactions(interactions)
        feed = [
            self._to_feed_item(content, position, display_names, latest, cutoff)
            for position, content in enumerate(diversified)
        ]

        # 7. Size cap
        feed = feed[:capacity]

        logger.info(
            "Generated feed: %d items from %d candidates "
            "(%d disqualified, %d new, %d backlog, %d resurfaced)",
            len(feed), len(content_pool), len(content_pool) - len(eligible),
            len(new), len(backlog), resurfaced,
        )
        return feed

    def _disqualified_ids(self, interactions: list[ContentInteraction]) -> set[str]:
        return {
            interaction.content_id
            for interaction in interactions
            if interaction.type in DISQUALIFYING_INTERACTIONS
        }

    def _unique(self, items: list[ContentItem]) -> list[ContentItem]:
        """Drop repeated items, keeping the first occurrence."""
        seen_ids: set[str] = set()
        seen_identities: set[tuple] = set()
        unique = []
        for item in items:
            if item.id in seen_ids or item.identity in seen_identities:
                continue
            seen_ids.add(item.id)
            seen_identities.add(item.identity)
            unique.append(item)
        return unique

    def _is_new(self, item: ContentItem, cutoff: datetime) -> bool:
        return item.published_at > cutoff

    def _resurface(
        self, feed: list[ContentItem], deferred: list[ContentItem]
    ) -> tuple[list[ContentItem], int]:
        """Interleave a bounded sample of deferred items into the feed.

        ``deferred`` holds the "not now" items the mix did not select. At most
        ``resurface_ratio`` of the feed size before resurfacing is added.
        """
        limit = math.floor(len(feed) * self.config.resurface_ratio)
        count = min(limit, len(deferred))
        if count <= 0:
            return list(feed), 0

        allowed = {item.id for item in deferred}
        chosen_ids: set[str] = set()
        returning: list[ContentItem] = []
        for item in self.chooser(deferred, count):
            if item.id not in allowed or item.id in chosen_ids:
                continue
            chosen_ids.add(item.id)
            returning.append(item)
        if len(returning) > count:
            logger.warning("Chooser returned %d items, expected %d", len(returning), count)
            returning = returning[:count]

        # Evenly spaced slots, offset by the items already inserted
        result = list(feed)
        for offset, item in enumerate(returning):
            slot = (offset + 1) * len(feed) // (count + 1)
            result.insert(slot + offset, item)

        return result, len(returning)

    def _display_names(self, sources: list[ContentSource]) -> dict[tuple, str]:
        names: dict[tuple, str] = {}
        for source in sources:
            names.setdefault(source.source_key, source.display_name)
        return names

    def _latest_interactions(
        self, interactions: list[ContentInteraction]
    ) -> dict[str, ContentInteraction]:
        latest: dict[str, ContentInteraction] = {}
        for interaction in interactions:
            current = latest.get(interaction.content_id)
            if current is None or interaction.timestamp >= current.timestamp:
                latest[interaction.content_id] = interaction
        return latest

    def _to_feed_item(
        self,
        content: ContentItem,
        position: int,
        display_names: dict[tuple, str],
        latest: dict[str, ContentInteraction],
        cutoff: datetime,
    ) -> FeedItem:
        interaction = latest.get(content.id)
        return FeedItem(
            content=content,
            position=position,
            is_new=self._is_new(content, cutoff),
            source_display_name=display_names.get(content.source_key) or UNKNOWN_SOURCE_NAME,
            interaction_state=interaction_state_for(interaction) if interaction else None,
        )
