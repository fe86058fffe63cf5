# src/storage/store_factory.py — v1
"""Factories for the image hosting and check record backends."""

from __future__ import annotations

from checkwise.config.settings import Settings
from checkwise.storage.base_image_store import BaseImageStore, NullImageStore
from checkwise.storage.base_record_store import BaseRecordStore


def create_image_store(settings: Settings) -> BaseImageStore:
    """Create the image store selected by IMAGE_STORE_BACKEND.

    Raises:
        ValueError: If the backend is not supported.
    """
    if settings.image_store_backend == "none":
        return NullImageStore()

    if settings.image_store_backend == "local":
        from checkwise.storage.local_image_store import LocalImageStore
        return LocalImageStore(root=settings.image_store_root)

    raise ValueError(f"Unsupported image store: {settings.image_store_backend!r}")


def create_record_store(settings: Settings) -> BaseRecordStore:
    """Create the record store selected by RECORD_STORE_BACKEND.

    Raises:
        ValueError: If the backend is not supported.
    """
    if settings.record_store_backend == "memory":
        from checkwise.storage.memory_record_store import MemoryRecordStore
        return MemoryRecordStore()

    if settings.record_store_backend == "json":
        from checkwise.storage.json_record_store import JsonRecordStore
        return JsonRecordStore(root=settings.record_store_root)

    raise ValueError(f"Unsupported record store: {settings.record_store_backend!r}")
