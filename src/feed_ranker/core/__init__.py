"""Core domain layer."""

from feed_ranker.core.backlog import BacklogMixer, MixPlan, plan_backlog_mix
from feed_ranker.core.diversity import DiversityEnforcer
from feed_ranker.core.entities import (
    ContentInteraction,
    ContentItem,
    ContentSource,
    DurationRange,
    FeedItem,
    FeedPreferences,
    FilterConfiguration,
    FilterKeyword,
    FilterResult,
    InteractionState,
    InteractionStateKind,
    InteractionType,
    SourceType,
    interaction_state_for,
)
from feed_ranker.core.feed_generator import FeedGenerator, random_chooser
from feed_ranker.core.filtering import (
    DurationRule,
    FilterEngine,
    FilterRule,
    KeywordRule,
    SourceTypeRule,
    build_rules,
)
from feed_ranker.core.interfaces import FeedCache, FeedRepository

__all__ = [
    "ContentItem",
    "ContentSource",
    "ContentInteraction",
    "InteractionType",
    "SourceType",
    "FeedPreferences",
    "FeedItem",
    "InteractionState",
    "InteractionStateKind",
    "interaction_state_for",
    "FilterKeyword",
    "DurationRange",
    "FilterConfiguration",
    "FilterResult",
    "FilterRule",
    "KeywordRule",
    "DurationRule",
    "SourceTypeRule",
    "FilterEngine",
    "build_rules",
    "DiversityEnforcer",
    "BacklogMixer",
    "MixPlan",
    "plan_backlog_mix",
    "FeedGenerator",
    "random_chooser",
    "FeedRepository",
    "FeedCache",
]
