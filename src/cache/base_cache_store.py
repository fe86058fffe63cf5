# src/cache/base_cache_store.py — v2
"""Abstract response cache interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from checkwise.core.models import CheckData


class BaseResponseCache(ABC):
    """Best-effort memoization of check results. A miss is never an error."""

    @abstractmethod
    def get(self, key: str) -> CheckData | None:
        """Return the cached value, or None if absent or expired."""

    @abstractmethod
    def set(self, key: str, value: CheckData) -> None:
        """Store a value under key with the configured time-to-live."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Drop a key if present."""

    @abstractmethod
    def clear(self) -> None:
        """Drop every entry."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of stored entries (expired ones may still be counted)."""


class NullResponseCache(BaseResponseCache):
    """Cache that never stores anything (CACHE_ENABLED=false)."""

    def get(self, key: str) -> CheckData | None:
        return None

    def set(self, key: str, value: CheckData) -> None:
        return None

    def delete(self, key: str) -> None:
        return None

    def clear(self) -> None:
        return None

    def __len__(self) -> int:
        return 0
