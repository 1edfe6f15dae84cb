import time
import logging
from typing import Any, Callable, NamedTuple

logger = logging.getLogger(__name__)

DEFAULT_TTL = 30 * 60  # 30 minutes


class CacheEntry(NamedTuple):
    data: Any
    stored_at: float


class ResponseCache:
    """
    In-memory response cache keyed by request URL.

    Entries expire after `ttl` seconds. Expiry is only checked on read: a stale
    entry is evicted by the `get` that finds it. There is no capacity bound.
    """

    def __init__(self, ttl: float = DEFAULT_TTL, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def set(self, key: str, data: Any) -> None:
        self._entries[key] = CacheEntry(data=data, stored_at=self._clock())

    def get(self, key: str) -> Any | None:
        """Returns the cached data, or None when absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._clock() - entry.stored_at > self.ttl:
            logger.info(f"Cache entry expired: {key}")
            del self._entries[key]
            return None

        return entry.data

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
