"""Source diversity enforcement for generated feeds."""

import logging
from collections import Counter
from typing import Callable, Hashable, Optional, Sequence, TypeVar

from feed_ranker.core.entities import ContentItem

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _source_key(item: ContentItem) -> Hashable:
    return item.source_key


def _can_spread(counts: Counter, max_consecutive: int) -> bool:
    """Check that the dominant source can still be broken up by the others."""
    if not counts:
        return True
    total = sum(counts.values())
    dominant = max(counts.values())
    return dominant <= max_consecutive * (total - dominant + 1)


class DiversityEnforcer:
    """Reorder items so no source has more than N items in a row.

    Items are taken in their original order. When the next item would extend
    a run past the limit it is deferred and the first item from another
    source is placed instead. If every remaining item shares the same
    source, the limit is relaxed and the items keep their order.
    """

    def __init__(self, key: Optional[Callable[[T], Hashable]] = None) -> None:
        self.key = key or _source_key

    def enforce(self, items: Sequence[T], max_consecutive: int) -> list[T]:
        if not items:
            return []

        max_consecutive = max(1, int(max_consecutive))
        remaining = list(items)
        counts = Counter(self.key(item) for item in remaining)
        result: list[T] = []

        run_key: Optional[Hashable] = None
        run_length = 0
        deferrals = 0

        while remaining:
            index = 0

            if run_length >= max_consecutive and self.key(remaining[0]) == run_key:
                alternative = self._first_index(remaining, lambda k: k != run_key)
                if alternative is not None:
                    index = alternative
                    deferrals += 1

            # Don't strand one source at the tail where nothing can break it up
            candidate_key = self.key(remaining[index])
            counts[candidate_key] -= 1
            if not _can_spread(+counts, max_consecutive):
                dominant_key = max(+counts, key=lambda k: counts[k])
                if dominant_key != run_key or run_length < max_consecutive:
                    dominant_index = self._first_index(remaining, lambda k: k == dominant_key)
                    if dominant_index is not None and dominant_index != index:
                        counts[candidate_key] += 1
                        counts[dominant_key] -= 1
                        index = dominant_index
                        candidate_key = dominant_key
                        deferrals += 1

            item = remaining.pop(index)
            result.append(item)

            if candidate_key == run_key:
                run_length += 1
            else:
                run_key = candidate_key
                run_length = 1

        if deferrals:
            logger.debug(
                "Diversity pass deferred %d of %d items (max %d in a row)",
                deferrals, len(result), max_consecutive,
            )

        return result

    def _first_index(self, items: list[T], predicate: Callable[[Hashable], bool]) -> Optional[int]:
        for index, item in enumerate(items):
            if predicate(self.key(item)):
                return index
        return None
