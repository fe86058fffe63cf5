# src/cache/fingerprint.py — v4
"""Request fingerprinting: derive the response cache key for a check.

Prompt-only requests are keyed by a bounded prefix of the prompt. Image
requests combine an image identity token with the prompt (or a sentinel when
there is none). The identity token is the uploaded filename by default; two
different images sharing a filename collide, so IMAGE_CACHE_IDENTITY can be
switched to ``content_hash`` to key on a SHA-256 of the bytes instead.
Uploads without a filename are always keyed by their content hash.
"""

from __future__ import annotations

import hashlib

from checkwise.config.settings import Settings
from checkwise.core.models import AnalysisRequest

PROMPT_KEY_PREFIX = "prompt_"
IMAGE_KEY_PREFIX = "image_"
NO_PROMPT_SENTINEL = "default"


def derive_cache_key(
    request: AnalysisRequest,
    settings: Settings | None = None,
) -> str:
    """Compute the mode-appropriate cache key for a request.

    Args:
        request: Validated request (at least one input present).
        settings: Supplies the prompt prefix length and image identity mode.

    Returns:
        Deterministic cache key string.
    """
    prompt_chars = 100 if settings is None else settings.cache_key_prompt_chars
    identity_mode = "filename" if settings is None else settings.image_cache_identity

    prompt = request.prompt
    if not request.has_image:
        return PROMPT_KEY_PREFIX + (prompt or "")[:prompt_chars]

    if identity_mode == "filename" and request.image_filename:
        identity = request.image_filename
    else:
        identity = content_hash(request.image_bytes or b"")
    return f"{IMAGE_KEY_PREFIX}{identity}_{prompt or NO_PROMPT_SENTINEL}"


def content_hash(raw_bytes: bytes) -> str:
    """SHA-256 hex digest of raw image bytes."""
    return hashlib.sha256(raw_bytes).hexdigest()
