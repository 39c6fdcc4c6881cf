"""Content filter rules and the engine that applies them."""

import re
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from feed_ranker.core.entities import (
    ContentItem,
    FilterConfiguration,
    FilterResult,
    SourceType,
)


class FilterRule(ABC):
    """A single content policy.

    ``matches`` returns True when the item violates the rule and has to be
    hidden from the feed.
    """

    @abstractmethod
    def matches(self, item: ContentItem) -> bool:
        """Check if the item is caught by this rule."""
        pass

    @abstractmethod
    def reason(self) -> str:
        """Human readable explanation shown next to filtered items."""
        pass

    def passes(self, item: ContentItem) -> bool:
        return not self.matches(item)


class KeywordRule(FilterRule):
    """Hide items whose title contains a keyword.

    Exact keywords match whole words only ("war" does not hit "Star Wars"),
    wildcard keywords treat ``*`` as any run of characters.
    """

    def __init__(self, keyword: str, is_wildcard: bool = False) -> None:
        self.keyword = keyword
        self.is_wildcard = is_wildcard
        self._pattern = self._compile(keyword, is_wildcard)

    @staticmethod
    def _compile(keyword: str, is_wildcard: bool) -> re.Pattern:
        if is_wildcard:
            parts = [re.escape(part) for part in keyword.split("*")]
            return re.compile(".*".join(parts), re.IGNORECASE | re.DOTALL)

        # Word boundaries are any non-alphanumeric character, underscore included
        return re.compile(
            rf"(?<![^\W_]){re.escape(keyword)}(?![^\W_])",
            re.IGNORECASE,
        )

    def matches(self, item: ContentItem) -> bool:
        if not item.title:
            return False
        return self._pattern.search(item.title) is not None

    def reason(self) -> str:
        return f"Keyword: {self.keyword}"

    def __repr__(self) -> str:
        mode = "wildcard" if self.is_wildcard else "exact"
        return f"KeywordRule({self.keyword!r}, {mode})"


class DurationRule(FilterRule):
    """Hide items shorter than ``min_seconds`` or longer than ``max_seconds``.

    Items with unknown duration are never hidden by this rule.
    """

    def __init__(self, min_seconds: Optional[int] = None, max_seconds: Optional[int] = None) -> None:
        self.min_seconds = min_seconds
        self.max_seconds = max_seconds

    def matches(self, item: ContentItem) -> bool:
        if item.duration is None:
            return False

        if self.min_seconds is not None and item.duration < self.min_seconds:
            return True

        if self.max_seconds is not None and item.duration > self.max_seconds:
            return True

        return False

    def reason(self) -> str:
        if self.min_seconds is not None and self.max_seconds is not None:
            return (
                f"Duration not between {_format_duration(self.min_seconds)}"
                f" and {_format_duration(self.max_seconds)}"
            )
        if self.min_seconds is not None:
            return f"Duration less than {_format_duration(self.min_seconds)}"
        if self.max_seconds is not None:
            return f"Duration more than {_format_duration(self.max_seconds)}"
        return "Duration"

    def __repr__(self) -> str:
        return f"DurationRule({self.min_seconds!r}, {self.max_seconds!r})"


class SourceTypeRule(FilterRule):
    """Hide items from platforms the user did not opt into."""

    def __init__(self, allowed_types: Iterable[SourceType]) -> None:
        self.allowed_types = frozenset(allowed_types)

    def matches(self, item: ContentItem) -> bool:
        return item.source_type not in self.allowed_types

    def reason(self) -> str:
        return "Content type not in allowed list"


def _format_duration(seconds: int) -> str:
    return f"{seconds // 60}m"


class FilterEngine:
    """Apply a set of rules conjunctively: an item survives only if every rule passes."""

    def __init__(self, rules: Optional[list[FilterRule]] = None) -> None:
        self.rules = list(rules or [])

    def evaluate(self, item: ContentItem) -> FilterResult:
        matched = [rule for rule in self.rules if rule.matches(item)]
        return FilterResult(
            item=item,
            is_filtered=bool(matched),
            matched_rules=matched,
            reasons=[rule.reason() for rule in matched],
        )

    def evaluate_batch(self, items: list[ContentItem]) -> list[ContentItem]:
        """Return the items that pass every rule, in their original order."""
        if not self.rules:
            return list(items)
        return [item for item in items if not self.evaluate(item).is_filtered]

    def test(self, item: ContentItem) -> FilterResult:
        """Evaluate an item without filtering it out (used by the filter preview)."""
        return self.evaluate(item)


def build_rules(config: FilterConfiguration) -> list[FilterRule]:
    """Turn a user's stored filter configuration into rules."""
    rules: list[FilterRule] = [
        KeywordRule(keyword.keyword, keyword.is_wildcard)
        for keyword in config.keywords
    ]

    duration = config.duration_range
    if duration is not None and duration.is_active:
        rules.append(DurationRule(duration.min or None, duration.max or None))

    if config.content_types:
        rules.append(SourceTypeRule(config.content_types))

    return rules
