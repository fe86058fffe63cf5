# src/extraction/ocr_factory.py — v1
"""Factory: instantiate the configured OCR engine."""

from __future__ import annotations

from checkwise.config.settings import Settings
from checkwise.extraction.base_ocr import BaseOcrEngine, NullOcrEngine


def create_ocr_engine(settings: Settings | None = None) -> BaseOcrEngine:
    """Create the OCR engine (tesseract unless OCR_ENABLED=false).

    Args:
        settings: Application settings. Defaults to English tesseract.

    Returns:
        BaseOcrEngine instance.
    """
    from checkwise.extraction.tesseract_ocr import TesseractOcrEngine

    if settings is None:
        return TesseractOcrEngine()
    if not settings.ocr_enabled:
        return NullOcrEngine()
    return TesseractOcrEngine(
        language=settings.ocr_language,
        tesseract_cmd=settings.tesseract_cmd,
    )
