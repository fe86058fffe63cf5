# src/storage/memory_record_store.py — v1
"""In-memory record store (RECORD_STORE_BACKEND=memory), lost on exit."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from checkwise.core.models import CheckRecord
from checkwise.storage.base_record_store import BaseRecordStore, new_record_id


class MemoryRecordStore(BaseRecordStore):
    def __init__(self) -> None:
        self._records: dict[str, CheckRecord] = {}

    async def create(
        self,
        prompt: str,
        image_url: str,
        extracted_text: str,
        result: dict[str, Any],
    ) -> str:
        now = datetime.now(timezone.utc)
        record = CheckRecord(
            id=new_record_id(),
            prompt=prompt,
            image=image_url,
            extracted_text=extracted_text,
            result=result,
            created_at=now,
            updated_at=now,
        )
        self._records[record.id] = record
        return record.id

    async def get(self, record_id: str) -> CheckRecord | None:
        return self._records.get(record_id)

    async def list_all(self) -> list[CheckRecord]:
        return sorted(self._records.values(), key=lambda r: r.created_at, reverse=True)

    async def delete(self, record_id: str) -> bool:
        return self._records.pop(record_id, None) is not None
