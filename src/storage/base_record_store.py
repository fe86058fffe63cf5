# src/storage/base_record_store.py — v1
"""Abstract check record store interface."""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from typing import Any

from checkwise.core.models import CheckRecord


class BaseRecordStore(ABC):
    """Persistence for completed checks."""

    @abstractmethod
    async def create(
        self,
        prompt: str,
        image_url: str,
        extracted_text: str,
        result: dict[str, Any],
    ) -> str:
        """Store a new record and return its identifier."""

    @abstractmethod
    async def get(self, record_id: str) -> CheckRecord | None:
        """Retrieve a record by identifier."""

    @abstractmethod
    async def list_all(self) -> list[CheckRecord]:
        """List all records, newest first."""

    @abstractmethod
    async def delete(self, record_id: str) -> bool:
        """Remove a record. Returns False if it did not exist."""


def new_record_id() -> str:
    """24 hex characters, unique per record."""
    return uuid.uuid4().hex[:24]
