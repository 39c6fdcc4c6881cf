"""Feed repository backed by a single YAML snapshot file."""

import logging
from pathlib import Path
from typing import Optional

import yaml

from feed_ranker.adapters.serialization import (
    SnapshotError,
    content_item_from_dict,
    filter_configuration_from_dict,
    interaction_from_dict,
    preferences_from_dict,
    source_from_dict,
)
from feed_ranker.core.entities import (
    ContentInteraction,
    ContentItem,
    ContentSource,
    FeedPreferences,
    FilterConfiguration,
)
from feed_ranker.core.interfaces import FeedRepository

logger = logging.getLogger(__name__)


class YamlSnapshotRepository(FeedRepository):
    """Read sources, content, interactions and settings from a YAML snapshot.

    Expected layout::

        sources: [...]        # ContentSource fields, one entry per subscription
        content: [...]        # ContentItem fields
        interactions: [...]   # ContentInteraction fields
        preferences:          # keyed by user id
          <user_id>: {backlog_ratio: 0.3, max_consecutive_from_source: 3}
        filters:              # keyed by user id
          <user_id>: {keywords: [...], duration: {min: 60, max: 3600}}

    The file is parsed once, on first access.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._sources: Optional[list[ContentSource]] = None
        self._content: list[ContentItem] = []
        self._interactions: list[ContentInteraction] = []
        self._preferences: dict = {}
        self._filters: dict = {}

    def _load(self) -> None:
        if self._sources is not None:
            return

        if not self.path.exists():
            raise SnapshotError(f"Snapshot not found: {self.path}")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise SnapshotError(f"Could not parse {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise SnapshotError(f"Snapshot {self.path} must be a mapping")

        self._content = [content_item_from_dict(entry) for entry in data.get("content") or []]
        self._interactions = [interaction_from_dict(entry) for entry in data.get("interactions") or []]
        self._preferences = data.get("preferences") or {}
        self._filters = data.get("filters") or {}
        self._sources = [source_from_dict(entry) for entry in data.get("sources") or []]

        logger.debug(
            "Loaded snapshot %s: %d sources, %d items, %d interactions",
            self.path, len(self._sources), len(self._content), len(self._interactions),
        )

    async def get_sources(self, user_id: str) -> list[ContentSource]:
        self._load()
        return [
            source for source in self._sources
            if source.user_id == user_id and not source.is_muted
        ]

    async def get_content(self, sources: list[ContentSource], limit: int) -> list[ContentItem]:
        self._load()
        keys = {source.source_key for source in sources}
        content = [item for item in self._content if item.source_key in keys]
        content.sort(key=lambda item: item.published_at, reverse=True)
        return content[:limit]

    async def get_interactions(self, user_id: str) -> list[ContentInteraction]:
        self._load()
        interactions = [i for i in self._interactions if i.user_id == user_id]
        interactions.sort(key=lambda i: i.timestamp, reverse=True)
        return interactions

    async def get_preferences(self, user_id: str) -> Optional[FeedPreferences]:
        self._load()
        data = self._preferences.get(user_id)
        if data is None:
            return None
        return preferences_from_dict(user_id, data)

    async def get_filter_configuration(self, user_id: str) -> FilterConfiguration:
        self._load()
        return filter_configuration_from_dict(user_id, self._filters.get(user_id) or {})
