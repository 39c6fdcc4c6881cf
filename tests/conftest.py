"""Shared test fixtures for feed ranker tests."""

from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from feed_ranker.core import (
    ContentInteraction,
    ContentItem,
    ContentSource,
    FeedPreferences,
    InteractionType,
    SourceType,
)


NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    """Fixed generation time."""
    return NOW


@pytest.fixture
def make_item():
    """Factory for content items published ``days_old`` days before NOW."""
    ids = count(1)

    def _make(
        id=None,
        source_id="channel-a",
        days_old=1.0,
        title=None,
        duration=600,
        source_type=SourceType.YOUTUBE,
        description=None,
    ) -> ContentItem:
        number = next(ids)
        item_id = id or f"c{number}"
        return ContentItem(
            id=item_id,
            source_type=source_type,
            source_id=source_id,
            original_id=f"orig-{item_id}",
            title=title or f"Video {item_id}",
            url=f"https://youtube.com/watch?v={item_id}",
            published_at=NOW - timedelta(days=days_old),
            description=description,
            duration=duration,
        )

    return _make


@pytest.fixture
def make_source():
    """Factory for content sources."""

    def _make(source_id="channel-a", display_name="Channel A", type=SourceType.YOUTUBE) -> ContentSource:
        return ContentSource(
            id=f"s-{source_id}",
            user_id="u1",
            type=type,
            source_id=source_id,
            display_name=display_name,
        )

    return _make


@pytest.fixture
def make_interaction():
    """Factory for interactions of user u1."""
    ids = count(1)

    def _make(content_id, type=InteractionType.WATCHED, hours_ago=1.0, **kwargs) -> ContentInteraction:
        return ContentInteraction(
            id=f"i{next(ids)}",
            user_id="u1",
            content_id=content_id,
            type=type,
            timestamp=NOW - timedelta(hours=hours_ago),
            **kwargs,
        )

    return _make


@pytest.fixture
def preferences() -> FeedPreferences:
    """Default preferences of user u1."""
    return FeedPreferences(user_id="u1", backlog_ratio=0.3, max_consecutive_from_source=3)
