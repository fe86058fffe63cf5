# src/extraction/base_ocr.py — v1
"""Abstract OCR engine interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseOcrEngine(ABC):
    """Extract plain text from an uploaded image."""

    @abstractmethod
    async def extract_text(self, image_bytes: bytes) -> str:
        """Return the recognized text (may be empty).

        Implementations may raise; callers treat any failure as "".
        """

    @property
    @abstractmethod
    def engine_name(self) -> str:
        """Engine identifier (tesseract, none, ...)."""


class NullOcrEngine(BaseOcrEngine):
    """OCR disabled: every image yields no text."""

    async def extract_text(self, image_bytes: bytes) -> str:
        return ""

    @property
    def engine_name(self) -> str:
        return "none"
