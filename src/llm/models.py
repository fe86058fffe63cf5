# src/llm/models.py — v2
"""Model invocation types: ContentPart, ModelInvocation, ModelOutput."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class ContentPart(BaseModel):
    """One ordered piece of model input: text or an inline binary payload."""

    kind: Literal["text", "inline_data"]
    text: str | None = None
    data: bytes | None = None
    mime_type: str | None = None

    @classmethod
    def from_text(cls, text: str) -> ContentPart:
        return cls(kind="text", text=text)

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> ContentPart:
        return cls(kind="inline_data", data=data, mime_type=mime_type)


class ModelInvocation(BaseModel):
    """Content sent to a model for a single generation call."""

    parts: list[ContentPart] = Field(default_factory=list)
    temperature: float | None = None
    max_output_tokens: int | None = None

    @classmethod
    def build(
        cls,
        instruction: str,
        image: bytes | None = None,
        image_mime_type: str | None = None,
        **kwargs: Any,
    ) -> ModelInvocation:
        """Image (if any) first, then the instruction text."""
        parts: list[ContentPart] = []
        if image:
            parts.append(ContentPart.from_bytes(image, image_mime_type or "image/png"))
        parts.append(ContentPart.from_text(instruction))
        return cls(parts=parts, **kwargs)

    @property
    def has_image(self) -> bool:
        return any(p.kind == "inline_data" for p in self.parts)


class ModelOutput(BaseModel):
    """Normalized generation result."""

    text: str
    model: str
    provider: str
    latency_ms: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    raw_response: Any = None
