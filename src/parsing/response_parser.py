# src/parsing/response_parser.py — v1
"""Turn free-form model output into a structured analysis result.

The model is asked for JSON but often wraps it in a code fence or ignores
the request entirely. ``parse_response`` never raises: when the text cannot
be read as a JSON object it returns a degraded, text-only result instead.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

from checkwise.core.models import AnalysisMode
from checkwise.text.sanitizer import sanitize, sanitize_text

logger = logging.getLogger(__name__)

_LEADING_FENCE = re.compile(r"^\s*```(?:json)?[ \t]*\n?", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\n?[ \t]*```\s*$")

TEXT_RESPONSE_TYPE = "text_response"


@dataclass(frozen=True)
class ParseOutcome:
    """Parsed result and whether the degraded shape was used."""

    result: dict[str, Any]
    degraded: bool = False


def strip_code_fence(raw_text: str) -> str:
    """Remove a leading ```/```json marker and a trailing ``` marker."""
    text = _LEADING_FENCE.sub("", raw_text, count=1)
    text = _TRAILING_FENCE.sub("", text, count=1)
    return text.strip()


def parse_response(
    raw_text: Any,
    mode: AnalysisMode,
    prompt_text: str | None = None,
    extracted_text: str = "",
) -> ParseOutcome:
    """Parse model output for the given mode.

    Args:
        raw_text: Text returned by the model (non-strings are coerced).
        mode: Analysis mode of the request.
        prompt_text: Original prompt, echoed in the prompt-only degraded shape.
        extracted_text: OCR text, echoed in the image degraded shapes.

    Returns:
        ParseOutcome with a JSON-compatible result; never raises.
    """
    text = raw_text if isinstance(raw_text, str) else ("" if raw_text is None else str(raw_text))

    try:
        parsed = json.loads(strip_code_fence(text))
        result = sanitize(parsed) if isinstance(parsed, dict) else None
    except (ValueError, RecursionError) as e:
        logger.info("Model output is not JSON (%s), using text result", e)
        return ParseOutcome(_degraded(text, mode, prompt_text, extracted_text), degraded=True)

    if not isinstance(parsed, dict):
        logger.info("Model output is JSON %s, not an object; using text result",
                    type(parsed).__name__)
        return ParseOutcome(_degraded(text, mode, prompt_text, extracted_text), degraded=True)

    return ParseOutcome(result)


def _degraded(
    text: str,
    mode: AnalysisMode,
    prompt_text: str | None,
    extracted_text: str,
) -> dict[str, Any]:
    if mode is AnalysisMode.PROMPT_ONLY:
        return {
            "type": TEXT_RESPONSE_TYPE,
            "response": sanitize_text(text),
            "userInput": prompt_text or "",
        }
    return {
        "rawResponse": sanitize_text(text),
        "extractedText": extracted_text or "",
    }
