# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for deployment-specific settings: model routing,
admission control, caching, collaborators (OCR, image hosting, records)
and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === LLM ===
    llm_provider: str = "google"
    llm_primary_model: str = "gemini-2.5-flash"
    llm_fallback_model: str = "gemini-2.0-flash"
    llm_timeout_s: float = 60.0
    llm_max_concurrency: int = 4
    llm_temperature: float | None = None
    llm_max_output_tokens: int | None = None

    # Provider API keys
    google_api_key: str = ""

    # === Admission control ===
    rate_limit_max_requests: int = 10
    rate_limit_window_s: float = 60.0

    # === Response cache ===
    cache_enabled: bool = True
    cache_ttl_s: float = 3600.0
    cache_max_entries: int = 1024
    cache_key_prompt_chars: int = 100
    image_cache_identity: Literal["filename", "content_hash"] = "filename"

    # === Uploads ===
    max_image_size_mb: int = 10

    # === OCR ===
    ocr_enabled: bool = True
    ocr_language: str = "eng"
    tesseract_cmd: str = ""

    # === Image hosting ===
    image_store_backend: Literal["local", "none"] = "local"
    image_store_root: Path = Path("~/.checkwise/images")

    # === Check records ===
    record_store_backend: Literal["json", "memory"] = "json"
    record_store_root: Path = Path("~/.checkwise/records")

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator(
        "rate_limit_max_requests",
        "cache_max_entries",
        "cache_key_prompt_chars",
        "llm_max_concurrency",
        "max_image_size_mb",
    )
    @classmethod
    def validate_positive_int(cls, v: int) -> int:  # noqa: N805
        if v <= 0:
            raise ValueError("must be > 0")
        return v

    @field_validator("rate_limit_window_s", "cache_ttl_s", "llm_timeout_s")
    @classmethod
    def validate_positive_seconds(cls, v: float) -> float:  # noqa: N805
        if v <= 0:
            raise ValueError("must be > 0 seconds")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if not self.llm_primary_model:
            errors.append("LLM_PRIMARY_MODEL must be set")

        if self.llm_fallback_model and self.llm_fallback_model == self.llm_primary_model:
            errors.append("LLM_FALLBACK_MODEL must differ from LLM_PRIMARY_MODEL")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def model_chain(self) -> list[str]:
        """Ordered model identifiers: primary first, then fallback if set."""
        chain = [self.llm_primary_model]
        if self.llm_fallback_model:
            chain.append(self.llm_fallback_model)
        return chain

    @property
    def max_image_size_bytes(self) -> int:
        return self.max_image_size_mb * 1024 * 1024


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or one-off runs).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
