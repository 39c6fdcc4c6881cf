"""Backlog ratio policy: how many archival items go next to fresh ones."""

import math
from dataclasses import dataclass

from feed_ranker.core.entities import ContentItem


@dataclass(frozen=True)
class MixPlan:
    """Number of items taken from each pool."""

    new: int
    backlog: int

    @property
    def total(self) -> int:
        return self.new + self.backlog


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def plan_backlog_mix(n_new: int, n_backlog: int, ratio: float, capacity: int) -> MixPlan:
    """Split ``capacity`` between new and backlog items.

    The backlog quota comes first, new items fill what is left, and any
    capacity new items could not use goes back to the backlog. The ratio is a
    target: the feed is filled from whichever pool has items rather than
    left short.
    """
    ratio = min(1.0, max(0.0, ratio))
    capacity = max(0, capacity)
    n_new = max(0, n_new)
    n_backlog = max(0, n_backlog)

    available = min(capacity, n_new + n_backlog)
    backlog = min(n_backlog, _round_half_up(min(n_backlog, ratio * available)))
    new = min(n_new, capacity - backlog)
    backlog = min(n_backlog, capacity - new)

    return MixPlan(new=new, backlog=backlog)


def _by_recency(items: list[ContentItem]) -> list[ContentItem]:
    return sorted(items, key=lambda item: item.published_at, reverse=True)


def interleave(new: list[ContentItem], backlog: list[ContentItem]) -> list[ContentItem]:
    """Spread backlog items evenly through the new ones."""
    total = len(new) + len(backlog)
    result: list[ContentItem] = []
    new_index = backlog_index = 0

    for position in range(total):
        # Backlog share owed by the end of this slot
        owed = _round_half_up((position + 1) * len(backlog) / total)
        if backlog_index < owed or new_index >= len(new):
            result.append(backlog[backlog_index])
            backlog_index += 1
        else:
            result.append(new[new_index])
            new_index += 1

    return result


class BacklogMixer:
    """Select and interleave new and backlog items according to a ratio."""

    def mix(
        self,
        new: list[ContentItem],
        backlog: list[ContentItem],
        ratio: float,
        capacity: int,
    ) -> list[ContentItem]:
        plan = plan_backlog_mix(len(new), len(backlog), ratio, capacity)
        selected_new = _by_recency(new)[:plan.new]
        selected_backlog = _by_recency(backlog)[:plan.backlog]
        return interleave(selected_new, selected_backlog)
