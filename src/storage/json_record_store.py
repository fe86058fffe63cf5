# src/storage/json_record_store.py — v2
"""JSON file-based record store (default RECORD_STORE_BACKEND=json).

Stores each check record as an individual JSON file under the store root.
File I/O runs in a worker thread so the event loop never blocks on disk.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from checkwise.core.errors import PersistenceError
from checkwise.core.models import CheckRecord
from checkwise.storage.base_record_store import BaseRecordStore, new_record_id

logger = logging.getLogger(__name__)

_SAFE_ID = re.compile(r"^[A-Za-z0-9_-]+$")


class JsonRecordStore(BaseRecordStore):
    """File-based record store using one JSON file per record."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).expanduser()

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
        try:
            await asyncio.to_thread(self._write, record)
        except OSError as e:
            raise PersistenceError(details=str(e)) from e
        return record.id

    async def get(self, record_id: str) -> CheckRecord | None:
        if not _SAFE_ID.match(record_id):
            return None
        return await asyncio.to_thread(self._read, self._record_path(record_id))

    async def list_all(self) -> list[CheckRecord]:
        return await asyncio.to_thread(self._read_all)

    async def delete(self, record_id: str) -> bool:
        if not _SAFE_ID.match(record_id):
            return False
        return await asyncio.to_thread(self._remove, self._record_path(record_id))

    def _write(self, record: CheckRecord) -> None:
        self._root.mkdir(parents=True, exist_ok=True)
        self._record_path(record.id).write_text(
            record.model_dump_json(by_alias=True, indent=2), encoding="utf-8"
        )

    def _read(self, path: Path) -> CheckRecord | None:
        if not path.exists():
            return None
        return self._load(path)

    def _read_all(self) -> list[CheckRecord]:
        records: list[CheckRecord] = []
        if not self._root.is_dir():
            return records

        for path in self._root.glob("*.json"):
            record = self._load(path)
            if record is not None:
                records.append(record)

        records.sort(key=lambda r: r.created_at, reverse=True)
        return records

    @staticmethod
    def _remove(path: Path) -> bool:
        if not path.exists():
            return False
        path.unlink()
        return True

    def _record_path(self, record_id: str) -> Path:
        return self._root / f"{record_id}.json"

    @staticmethod
    def _load(path: Path) -> CheckRecord | None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return CheckRecord.model_validate(data)
        except (OSError, json.JSONDecodeError, PydanticValidationError) as e:
            logger.warning("Skipping unreadable record %s: %s", path.name, e)
            return None
