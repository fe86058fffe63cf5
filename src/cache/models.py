# src/cache/models.py — v2
"""Cache domain model: CacheEntry."""

from __future__ import annotations

from pydantic import BaseModel

from checkwise.core.models import CheckData


class CacheEntry(BaseModel):
    """Single memoized check result with its own expiry."""

    key: str
    value: CheckData
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at
