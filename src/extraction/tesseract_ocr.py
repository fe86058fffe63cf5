# src/extraction/tesseract_ocr.py — v1
"""Tesseract OCR engine via pytesseract + Pillow.

Recognition is CPU-bound and synchronous, so it runs in a worker thread to
keep the event loop free for other requests.
"""

from __future__ import annotations

import asyncio
import io
import logging

from checkwise.extraction.base_ocr import BaseOcrEngine

logger = logging.getLogger(__name__)


class TesseractOcrEngine(BaseOcrEngine):
    """OCR with the local tesseract binary.

    Args:
        language: Tesseract language code(s), e.g. "eng" or "deu+eng".
        tesseract_cmd: Explicit path to the tesseract binary ("" = PATH lookup).
    """

    def __init__(self, language: str = "eng", tesseract_cmd: str = "") -> None:
        self._language = language
        self._tesseract_cmd = tesseract_cmd

    async def extract_text(self, image_bytes: bytes) -> str:
        return await asyncio.to_thread(self._recognize, image_bytes)

    def _recognize(self, image_bytes: bytes) -> str:
        import pytesseract
        from PIL import Image

        if self._tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self._tesseract_cmd

        with Image.open(io.BytesIO(image_bytes)) as img:
            text = pytesseract.image_to_string(img, lang=self._language)
        logger.debug("OCR extracted %d characters", len(text))
        return text.strip()

    @property
    def engine_name(self) -> str:
        return "tesseract"
