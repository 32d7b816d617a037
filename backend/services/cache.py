"""Simple in-memory TTL cache. No Redis needed.

One instance per resource kind, each with its own TTL. Expiry is checked
lazily on read; there is no background sweep and no size bound, so a
long-running process keeps every key it has ever fetched until it is read
again after expiry.

get/set never await, so check-then-act stays atomic under asyncio.
"""

import logging
import time
from typing import Any, Callable

logger = logging.getLogger(__name__)


class TTLCache:
    def __init__(self, ttl_ms: int, clock: Callable[[], float] = time.time):
        if ttl_ms <= 0:
            raise ValueError(f"ttl_ms must be positive, got {ttl_ms}")
        self.ttl_ms = ttl_ms
        self._clock = clock
        self._store: dict[str, tuple[float, Any]] = {}

    def get(self, key: str) -> Any | None:
        if key in self._store:
            expires_at, value = self._store[key]
            if self._clock() < expires_at:
                return value
            del self._store[key]
            logger.debug("Cache entry expired: %s", key)
        return None

    def set(self, key: str, value: Any) -> None:
        self._store[key] = (self._clock() + self.ttl_ms / 1000, value)

    def delete(self, key: str) -> None:
        self._store.pop(key, None)

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
