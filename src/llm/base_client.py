# src/llm/base_client.py — v2
"""Abstract generative model client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from checkwise.llm.models import ModelInvocation, ModelOutput


class BaseModelClient(ABC):
    """Unified interface over model providers, addressed by model identifier."""

    @abstractmethod
    async def invoke(self, model_id: str, invocation: ModelInvocation) -> ModelOutput:
        """Run one generation call.

        Raises:
            ModelError: Classified upstream failure.
        """

    @property
    @abstractmethod
    def supports_vision(self) -> bool:
        """Whether inline image parts are accepted."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (google, ...)."""
