# src/extraction/media_types.py — v1
"""Image MIME type detection for uploads."""

from __future__ import annotations

from pathlib import Path

# Mapping of extensions to MIME types
_MIME_MAP: dict[str, str] = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".tiff": "image/tiff",
    ".tif": "image/tiff",
    ".heic": "image/heic",
}

# Leading bytes of common image formats
_MAGIC: list[tuple[bytes, str]] = [
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"BM", "image/bmp"),
    (b"II*\x00", "image/tiff"),
    (b"MM\x00*", "image/tiff"),
]


def detect_media_type(filename: str | None, data: bytes | None = None) -> str | None:
    """Guess an image MIME type from magic bytes, then the file extension.

    Returns:
        MIME type string, or None when nothing identifies the content.
    """
    if data:
        if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
            return "image/webp"
        for magic, media_type in _MAGIC:
            if data.startswith(magic):
                return media_type
    if filename:
        return _MIME_MAP.get(Path(filename).suffix.lower())
    return None


def is_image_media_type(media_type: str | None) -> bool:
    return bool(media_type) and media_type.lower().startswith("image/")
