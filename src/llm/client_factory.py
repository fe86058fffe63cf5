# src/llm/client_factory.py — v3
"""Factory: instantiate a model client from its provider name.

Adapters are registered by class path and imported lazily, so an SDK is only
required once its provider is selected.
"""

from __future__ import annotations

import importlib
import logging

from checkwise.config.settings import Settings
from checkwise.llm.base_client import BaseModelClient

logger = logging.getLogger(__name__)

# Registry of provider name -> adapter class path (lazy import).
_PROVIDER_REGISTRY: dict[str, str] = {
    "google": "checkwise.llm.adapters.google_adapter.GeminiClient",
}


class UnsupportedProviderError(ValueError):
    """Raised when a provider is not registered."""


def create_model_client(
    provider: str,
    settings: Settings | None = None,
    **kwargs: object,
) -> BaseModelClient:
    """Instantiate the correct adapter from provider name.

    Args:
        provider: Provider identifier (google, or a registered custom name).
        settings: Application settings (for API keys).
        **kwargs: Additional provider-specific arguments.

    Returns:
        Configured BaseModelClient instance.

    Raises:
        UnsupportedProviderError: If provider is not registered.
    """
    if provider not in _PROVIDER_REGISTRY:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {provider!r}. "
            f"Available: {', '.join(sorted(_PROVIDER_REGISTRY))}"
        )

    adapter_cls = _import_class(_PROVIDER_REGISTRY[provider])

    init_kwargs = dict(kwargs)
    if settings is not None and provider == "google":
        init_kwargs.setdefault("api_key", settings.google_api_key)

    logger.debug("Creating model client: provider=%s", provider)
    return adapter_cls(**init_kwargs)


def register_provider(name: str, class_path: str) -> None:
    """Register a custom provider adapter.

    Args:
        name: Provider identifier.
        class_path: Fully qualified class path implementing BaseModelClient.
    """
    _PROVIDER_REGISTRY[name] = class_path
    logger.info("Registered LLM provider: %s -> %s", name, class_path)


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
