"""Conversion between domain entities and plain dicts (YAML / JSON)."""

from datetime import date, datetime, timezone
from typing import Any, Optional

from feed_ranker.core.entities import (
    ContentInteraction,
    ContentItem,
    ContentSource,
    DurationRange,
    FeedItem,
    FeedPreferences,
    FilterConfiguration,
    FilterKeyword,
    InteractionState,
    InteractionStateKind,
    InteractionType,
    SourceType,
    utcnow,
)


class SnapshotError(ValueError):
    """Raised when stored data can't be turned into entities."""


def parse_datetime(value: Any) -> datetime:
    """Parse a timestamp from YAML/JSON. Naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as e:
            raise SnapshotError(f"Invalid timestamp: {value!r}") from e
    else:
        raise SnapshotError(f"Invalid timestamp: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _optional_datetime(value: Any) -> Optional[datetime]:
    return parse_datetime(value) if value is not None else None


def _enum(enum_type, value: Any):
    try:
        return enum_type(str(value).upper())
    except ValueError as e:
        raise SnapshotError(f"Unknown {enum_type.__name__}: {value!r}") from e


def _required(data: dict, key: str) -> Any:
    if key not in data or data[key] is None:
        raise SnapshotError(f"Missing field '{key}' in {data!r}")
    return data[key]


def content_item_from_dict(data: dict) -> ContentItem:
    try:
        return ContentItem(
            id=str(_required(data, "id")),
            source_type=_enum(SourceType, _required(data, "source_type")),
            source_id=str(_required(data, "source_id")),
            original_id=str(data.get("original_id") or data["id"]),
            title=data.get("title") or "",
            url=data.get("url") or "",
            published_at=parse_datetime(_required(data, "published_at")),
            description=data.get("description"),
            thumbnail_url=data.get("thumbnail_url"),
            duration=int(data["duration"]) if data.get("duration") is not None else None,
            fetched_at=_optional_datetime(data.get("fetched_at")) or utcnow(),
            last_seen_in_feed=_optional_datetime(data.get("last_seen_in_feed")) or utcnow(),
        )
    except SnapshotError:
        raise
    except (TypeError, ValueError) as e:
        raise SnapshotError(f"Invalid content item: {e}") from e


def source_from_dict(data: dict) -> ContentSource:
    return ContentSource(
        id=str(_required(data, "id")),
        user_id=str(_required(data, "user_id")),
        type=_enum(SourceType, _required(data, "type")),
        source_id=str(_required(data, "source_id")),
        display_name=data.get("display_name") or "",
        avatar_url=data.get("avatar_url"),
        is_muted=bool(data.get("is_muted", False)),
        always_safe=bool(data.get("always_safe", False)),
        added_at=_optional_datetime(data.get("added_at")) or utcnow(),
        last_fetch_at=_optional_datetime(data.get("last_fetch_at")),
        last_fetch_status=data.get("last_fetch_status", "pending"),
        error_message=data.get("error_message"),
    )


def interaction_from_dict(data: dict) -> ContentInteraction:
    return ContentInteraction(
        id=str(_required(data, "id")),
        user_id=str(_required(data, "user_id")),
        content_id=str(_required(data, "content_id")),
        type=_enum(InteractionType, _required(data, "type")),
        timestamp=_optional_datetime(data.get("timestamp")) or utcnow(),
        watch_duration=data.get("watch_duration"),
        completion_rate=data.get("completion_rate"),
        dismiss_reason=data.get("dismiss_reason"),
        collection=data.get("collection"),
    )


def preferences_from_dict(user_id: str, data: dict) -> FeedPreferences:
    try:
        return FeedPreferences(
            user_id=user_id,
            backlog_ratio=float(data.get("backlog_ratio", 0.3)),
            max_consecutive_from_source=int(data.get("max_consecutive_from_source", 3)),
            theme=data.get("theme", "dark"),
            density=data.get("density", "cozy"),
            auto_play=bool(data.get("auto_play", False)),
            updated_at=_optional_datetime(data.get("updated_at")) or utcnow(),
        )
    except ValueError as e:
        raise SnapshotError(f"Invalid preferences for {user_id}: {e}") from e


def filter_configuration_from_dict(user_id: str, data: dict) -> FilterConfiguration:
    keywords = []
    for index, entry in enumerate(data.get("keywords") or []):
        # Plain strings are exact keywords
        if isinstance(entry, str):
            entry = {"keyword": entry}
        try:
            keywords.append(FilterKeyword(
                id=str(entry.get("id", f"{user_id}-kw-{index}")),
                keyword=str(entry.get("keyword", "")),
                is_wildcard=bool(entry.get("is_wildcard", False)),
                created_at=_optional_datetime(entry.get("created_at")) or utcnow(),
            ))
        except ValueError as e:
            raise SnapshotError(f"Invalid keyword filter: {e}") from e

    duration_range = None
    duration = data.get("duration")
    if duration:
        duration_range = DurationRange(min=duration.get("min"), max=duration.get("max"))

    return FilterConfiguration(
        user_id=user_id,
        keywords=keywords,
        duration_range=duration_range,
        content_types=[_enum(SourceType, t) for t in data.get("content_types") or []],
    )


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def content_item_to_dict(item: ContentItem) -> dict:
    return {
        "id": item.id,
        "sourceType": item.source_type.value,
        "sourceId": item.source_id,
        "originalId": item.original_id,
        "title": item.title,
        "description": item.description or "",
        "thumbnailUrl": item.thumbnail_url,
        "url": item.url,
        "duration": item.duration,
        "publishedAt": _isoformat(item.published_at),
        "fetchedAt": _isoformat(item.fetched_at),
        "lastSeenInFeed": _isoformat(item.last_seen_in_feed),
    }


def interaction_state_to_dict(state: Optional[InteractionState]) -> Optional[dict]:
    if state is None:
        return None

    data: dict[str, Any] = {"type": state.kind.value}
    if state.kind == InteractionStateKind.WATCHED:
        data["at"] = _isoformat(state.at)
    elif state.kind == InteractionStateKind.SAVED:
        data["collection"] = state.collection
    elif state.kind == InteractionStateKind.DEFERRED:
        data["willReturnAt"] = _isoformat(state.will_return_at)
    return data


def feed_item_to_dict(feed_item: FeedItem) -> dict:
    """JSON shape served to the feed UI."""
    return {
        "content": content_item_to_dict(feed_item.content),
        "position": feed_item.position,
        "isNew": feed_item.is_new,
        "sourceDisplayName": feed_item.source_display_name,
        "interactionState": interaction_state_to_dict(feed_item.interaction_state),
    }
