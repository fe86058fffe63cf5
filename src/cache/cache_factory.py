# src/cache/cache_factory.py — v3
"""Factory for response cache instantiation."""

from __future__ import annotations

from checkwise.cache.base_cache_store import BaseResponseCache, NullResponseCache
from checkwise.config.settings import Settings


def create_response_cache(settings: Settings | None = None) -> BaseResponseCache:
    """Instantiate the configured response cache.

    Args:
        settings: Application settings. Defaults to a memory cache with a
            one hour time-to-live.

    Returns:
        Configured BaseResponseCache implementation.
    """
    from checkwise.cache.memory_store import MemoryResponseCache

    if settings is None:
        return MemoryResponseCache()

    if not settings.cache_enabled:
        return NullResponseCache()

    return MemoryResponseCache(
        ttl_s=settings.cache_ttl_s,
        max_entries=settings.cache_max_entries,
    )
