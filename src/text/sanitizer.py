# src/text/sanitizer.py — v1
"""Strip lightweight markdown from model output.

Models asked for JSON still sprinkle markdown inside string values. The
transform removes fenced code blocks, emphasis, headings, list markers and
inline code markers, then collapses runs of blank lines. It is applied
repeatedly until the text stops changing, so the result is a fixpoint and
``sanitize_text(sanitize_text(s)) == sanitize_text(s)``.
"""

from __future__ import annotations

import re
from typing import Any

# Order matters: code fences go first so their contents never pair with
# markers outside the fence; emphasis and headings go before the blank-line
# collapse because removed markers can leave new empty lines.
_RULES: list[tuple[re.Pattern[str], str]] = [
    # ```lang ... ``` (contents discarded)
    (re.compile(r"```[\s\S]*?```"), ""),
    # **bold** / __bold__
    (re.compile(r"\*\*(?!\s)(.+?)(?<!\s)\*\*"), r"\1"),
    (re.compile(r"(?<!\w)__(?!\s)(.+?)(?<!\s)__(?!\w)"), r"\1"),
    # *italic* / _italic_ (a lone "2 * 3" or snake_case is left alone)
    (re.compile(r"\*(?!\s)(.+?)(?<!\s)\*"), r"\1"),
    (re.compile(r"(?<!\w)_(?!\s)(.+?)(?<!\s)_(?!\w)"), r"\1"),
    # # Heading
    (re.compile(r"^[ \t]*#{1,6}[ \t]+", re.MULTILINE), ""),
    # - item / * item / + item / 1. item
    (re.compile(r"^[ \t]*[*\-+][ \t]+", re.MULTILINE), ""),
    (re.compile(r"^[ \t]*\d+\.[ \t]+", re.MULTILINE), ""),
    # `inline` (contents kept)
    (re.compile(r"`([^`\n]+?)`"), r"\1"),
    # 3+ newlines (blank whitespace allowed between) -> exactly two
    (re.compile(r"\n\s*\n\s*\n"), "\n\n"),
]


def _apply_rules(text: str) -> str:
    for pattern, replacement in _RULES:
        text = pattern.sub(replacement, text)
    return text.strip()


def sanitize_text(text: str) -> str:
    """Remove markdown markup from a single string."""
    if not text:
        return text
    # Every rule only deletes characters, so the loop terminates.
    while True:
        cleaned = _apply_rules(text)
        if cleaned == text:
            return cleaned
        text = cleaned


def sanitize(value: Any) -> Any:
    """Sanitize every string leaf of a JSON-compatible tree.

    Mappings keep their keys, sequences keep their order; numbers, booleans
    and None pass through untouched. Tuples come back as lists.
    """
    if isinstance(value, str):
        return sanitize_text(value)
    if isinstance(value, dict):
        return {key: sanitize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [sanitize(item) for item in value]
    return value
