# src/storage/local_image_store.py — v2
"""Local filesystem image hosting (default IMAGE_STORE_BACKEND=local)."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from pathlib import Path

from checkwise.storage.base_image_store import BaseImageStore

logger = logging.getLogger(__name__)


class LocalImageStore(BaseImageStore):
    """Write uploads under a root directory and return ``file://`` URLs.

    Files are named ``check_<epoch-ms><suffix>``; a short random tag is
    appended when two uploads land in the same millisecond. Disk writes run
    in a worker thread.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).expanduser().resolve()

    async def store(self, image_bytes: bytes, filename: str | None) -> str:
        return await asyncio.to_thread(self._write, image_bytes, filename)

    def _write(self, image_bytes: bytes, filename: str | None) -> str:
        self._root.mkdir(parents=True, exist_ok=True)
        suffix = Path(filename).suffix.lower() if filename else ""
        public_id = f"check_{int(time.time() * 1000)}"
        path = self._root / f"{public_id}{suffix}"
        if path.exists():
            path = self._root / f"{public_id}_{uuid.uuid4().hex[:6]}{suffix}"
        path.write_bytes(image_bytes)
        logger.debug("Stored image %s (%d bytes)", path.name, len(image_bytes))
        return path.as_uri()
