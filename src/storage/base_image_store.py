# src/storage/base_image_store.py — v1
"""Abstract image hosting interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseImageStore(ABC):
    """Host uploaded images and hand back a URL."""

    @abstractmethod
    async def store(self, image_bytes: bytes, filename: str | None) -> str:
        """Persist the image and return its URL.

        Implementations may raise; the orchestrator treats failure as "".
        """


class NullImageStore(BaseImageStore):
    """Image hosting disabled: nothing is kept, the URL is empty."""

    async def store(self, image_bytes: bytes, filename: str | None) -> str:
        return ""
