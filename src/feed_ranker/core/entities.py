"""Core domain entities."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SourceType(str, Enum):
    """Platform a content source lives on."""

    YOUTUBE = "YOUTUBE"
    TWITCH = "TWITCH"
    RSS = "RSS"
    PODCAST = "PODCAST"


class InteractionType(str, Enum):
    """What a user did with a content item."""

    WATCHED = "WATCHED"
    SAVED = "SAVED"
    DISMISSED = "DISMISSED"
    NOT_NOW = "NOT_NOW"
    BLOCKED = "BLOCKED"


# Interactions that remove an item from the feed for good
DISQUALIFYING_INTERACTIONS = frozenset({
    InteractionType.WATCHED,
    InteractionType.SAVED,
    InteractionType.DISMISSED,
    InteractionType.BLOCKED,
})


@dataclass
class ContentItem:
    """A single fetched piece of content (usually a video)."""

    id: str
    source_type: SourceType
    source_id: str
    original_id: str
    title: str
    url: str
    published_at: datetime
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    duration: Optional[int] = None  # seconds
    fetched_at: datetime = field(default_factory=utcnow)
    last_seen_in_feed: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Content id cannot be empty")
        if not self.url:
            raise ValueError("URL cannot be empty")

        self.published_at = ensure_utc(self.published_at)
        self.fetched_at = ensure_utc(self.fetched_at)
        self.last_seen_in_feed = ensure_utc(self.last_seen_in_feed)

    @property
    def identity(self) -> tuple[SourceType, str]:
        return (self.source_type, self.original_id)

    @property
    def source_key(self) -> tuple[str, SourceType]:
        return (self.source_id, self.source_type)


@dataclass
class ContentSource:
    """A user's subscription to a channel or feed."""

    id: str
    user_id: str
    type: SourceType
    source_id: str
    display_name: str
    avatar_url: Optional[str] = None
    is_muted: bool = False
    always_safe: bool = False
    added_at: datetime = field(default_factory=utcnow)
    last_fetch_at: Optional[datetime] = None
    last_fetch_status: str = "pending"  # success | error | pending
    error_message: Optional[str] = None

    @property
    def source_key(self) -> tuple[str, SourceType]:
        return (self.source_id, self.type)


@dataclass
class ContentInteraction:
    """One entry of the append-only interaction log."""

    id: str
    user_id: str
    content_id: str
    type: InteractionType
    timestamp: datetime = field(default_factory=utcnow)
    watch_duration: Optional[int] = None
    completion_rate: Optional[float] = None
    dismiss_reason: Optional[str] = None
    collection: Optional[str] = None

    def __post_init__(self) -> None:
        self.timestamp = ensure_utc(self.timestamp)


@dataclass
class FeedPreferences:
    """Per-user feed tunables."""

    user_id: str
    backlog_ratio: float = 0.3
    max_consecutive_from_source: int = 3

    # Display only, the ranking never reads these
    theme: str = "dark"
    density: str = "cozy"
    auto_play: bool = False
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        if not 0.0 <= self.backlog_ratio <= 1.0:
            raise ValueError("Backlog ratio must be between 0 and 1")
        if self.max_consecutive_from_source < 1:
            raise ValueError("Max consecutive from source must be at least 1")


class InteractionStateKind(str, Enum):
    """Interaction state shown on a feed card."""

    NEVER_SEEN = "never-seen"
    DEFERRED = "dismissed-temp"
    SAVED = "saved"
    WATCHED = "watched"


@dataclass
class InteractionState:
    """Snapshot of the latest interaction the UI has to render."""

    kind: InteractionStateKind
    at: Optional[datetime] = None
    collection: Optional[str] = None
    will_return_at: Optional[datetime] = None


def interaction_state_for(interaction: ContentInteraction) -> InteractionState:
    """Project an interaction onto the state a feed card displays."""
    if interaction.type == InteractionType.WATCHED:
        return InteractionState(InteractionStateKind.WATCHED, at=interaction.timestamp)
    if interaction.type == InteractionType.SAVED:
        return InteractionState(
            InteractionStateKind.SAVED,
            at=interaction.timestamp,
            collection=interaction.collection,
        )
    if interaction.type == InteractionType.NOT_NOW:
        return InteractionState(
            InteractionStateKind.DEFERRED,
            at=interaction.timestamp,
            will_return_at=interaction.timestamp + timedelta(days=1),
        )
    # Dismissed and blocked items never reach the feed
    return InteractionState(InteractionStateKind.NEVER_SEEN)


@dataclass
class FeedItem:
    """Content placed in a generated feed."""

    content: ContentItem
    position: int
    is_new: bool
    source_display_name: str
    interaction_state: Optional[InteractionState] = None

    @property
    def is_resurfaced(self) -> bool:
        return (
            self.interaction_state is not None
            and self.interaction_state.kind == InteractionStateKind.DEFERRED
        )


@dataclass
class FilterKeyword:
    """A keyword the user wants hidden from the feed."""

    id: str
    keyword: str
    is_wildcard: bool = False
    created_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        self.keyword = self.keyword.strip()
        if not self.keyword:
            raise ValueError("Keyword cannot be empty")


@dataclass
class DurationRange:
    """Inclusive duration bounds in seconds, either end optional."""

    min: Optional[int] = None
    max: Optional[int] = None

    @property
    def is_active(self) -> bool:
        return bool(self.min) or bool(self.max)


@dataclass
class FilterConfiguration:
    """All content filters of one user."""

    user_id: str
    keywords: list[FilterKeyword] = field(default_factory=list)
    duration_range: Optional[DurationRange] = None
    content_types: list[SourceType] = field(default_factory=list)


@dataclass
class FilterResult:
    """Outcome of running the filter rules over one item."""

    item: ContentItem
    is_filtered: bool
    matched_rules: list = field(default_factory=list)
    reasons: list[str] = field(default_factory=list)
