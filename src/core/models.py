# src/core/models.py — v2
"""Shared Pydantic domain models used across modules.

No module redefines these types; all imports come from core.models.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Prompt stored with image-only checks, which carry no user instruction.
DEFAULT_IMAGE_INSTRUCTION = "Check this answer and provide feedback"


class AnalysisMode(str, Enum):
    """Request shape, decides the instruction template and result schema."""

    PROMPT_ONLY = "prompt_only"
    IMAGE_ONLY = "image_only"
    IMAGE_WITH_INSTRUCTION = "image_with_instruction"

    @property
    def has_image(self) -> bool:
        return self is not AnalysisMode.PROMPT_ONLY


def mode_for(has_prompt: bool, has_image: bool) -> AnalysisMode:
    """Select the analysis mode for a request shape.

    Raises:
        ValueError: If neither a prompt nor an image is present.
    """
    if has_image:
        return AnalysisMode.IMAGE_WITH_INSTRUCTION if has_prompt else AnalysisMode.IMAGE_ONLY
    if has_prompt:
        return AnalysisMode.PROMPT_ONLY
    raise ValueError("request has neither prompt nor image")


class AnalysisRequest(BaseModel):
    """Inbound check request: a prompt, an image, or both."""

    prompt_text: str | None = None
    image_bytes: bytes | None = None
    image_mime_type: str | None = None
    image_filename: str | None = None

    @property
    def has_prompt(self) -> bool:
        return bool(self.prompt_text and self.prompt_text.strip())

    @property
    def has_image(self) -> bool:
        return bool(self.image_bytes)

    @property
    def prompt(self) -> str | None:
        """Prompt text with surrounding whitespace removed, None if blank."""
        return self.prompt_text.strip() if self.has_prompt else None

    @property
    def mode(self) -> AnalysisMode:
        return mode_for(self.has_prompt, self.has_image)


class CheckData(BaseModel):
    """Payload returned to the caller and memoized in the response cache."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    analysis: dict[str, Any] = Field(default_factory=dict)
    image_url: str | None = Field(default=None, alias="imageUrl")
    extracted_text: str | None = Field(default=None, alias="extractedText")

    def to_body(self) -> dict[str, Any]:
        """Render with wire field names, dropping absent top-level fields."""
        body = self.model_dump(by_alias=True)
        return {k: v for k, v in body.items() if v is not None}


class CheckRecord(BaseModel):
    """Persisted outcome of a fresh (non-cached) check."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    prompt: str = ""
    image: str = ""
    extracted_text: str = Field(default="", alias="extractedText")
    result: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
