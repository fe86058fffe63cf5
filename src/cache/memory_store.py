# src/cache/memory_store.py — v1
"""In-process TTL cache with least-recently-used eviction.

Expired entries are dropped lazily on lookup; there is no background sweep.
Operations never await, so the store is safe under asyncio without a lock.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from typing import Callable

from checkwise.cache.base_cache_store import BaseResponseCache
from checkwise.cache.models import CacheEntry
from checkwise.core.models import CheckData

logger = logging.getLogger(__name__)


class MemoryResponseCache(BaseResponseCache):
    """Bounded in-memory response cache.

    Args:
        ttl_s: Time-to-live applied to each entry at write time.
        max_entries: Capacity; the least recently used entry is evicted first.
        clock: Monotonic time source (injectable for tests).
    """

    def __init__(
        self,
        ttl_s: float = 3600.0,
        max_entries: int = 1024,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_s <= 0:
            raise ValueError("ttl_s must be > 0")
        if max_entries <= 0:
            raise ValueError("max_entries must be > 0")
        self._ttl_s = ttl_s
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    def get(self, key: str) -> CheckData | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._entries[key]
            logger.debug("Cache entry expired: %s", key)
            return None
        self._entries.move_to_end(key)
        return entry.value.model_copy(deep=True)

    def set(self, key: str, value: CheckData) -> None:
        self._entries[key] = CacheEntry(
            key=key,
            value=value.model_copy(deep=True),
            expires_at=self._clock() + self._ttl_s,
        )
        self._entries.move_to_end(key)
        while len(self._entries) > self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Cache full, evicted %s", evicted)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
