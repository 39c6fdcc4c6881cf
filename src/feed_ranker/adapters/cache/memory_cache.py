"""Process-local feed cache."""

import time
from typing import Any, Callable, Optional

from feed_ranker.core.interfaces import FeedCache


class InMemoryFeedCache(FeedCache):
    """Dict-backed cache with per-key expiry.

    Args:
        clock: Monotonic time source in seconds, replaceable in tests.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self.clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}

    async def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        expires_at, value = entry
        if self.clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        now = self.clock()
        self._prune(now)
        if ttl_seconds <= 0:
            self._entries.pop(key, None)
            return
        self._entries[key] = (now + ttl_seconds, value)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def _prune(self, now: float) -> None:
        expired = [key for key, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)
