# src/llm/fallback.py — v2
"""Primary/fallback model chain with per-call deadline and concurrency cap.

Only ``ModelNotFound`` on the primary model earns a single attempt on the
fallback model. Quota and credential failures are account-level, so a second
model would fail the same way; they surface immediately, as does ``Other``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Sequence

from checkwise.config.settings import Settings
from checkwise.core.errors import ModelError, ModelErrorKind, ModelUnavailableError
from checkwise.llm.base_client import BaseModelClient
from checkwise.llm.errors import to_model_error
from checkwise.llm.models import ModelInvocation, ModelOutput
from checkwise.logging.context import set_step_context

logger = logging.getLogger(__name__)


@dataclass
class InvocationResult:
    """Output of the chain plus which model produced it."""

    output: ModelOutput
    model: str
    used_fallback: bool = False
    failures: list[ModelError] = field(default_factory=list)


class ModelInvoker:
    """Invoke a model client along an ordered (primary, fallback) chain.

    Args:
        client: Provider client.
        models: Model identifiers in priority order; at most the first two
            are used.
        timeout_s: Deadline for each upstream call.
        max_concurrency: Upper bound on in-flight upstream calls.
    """

    def __init__(
        self,
        client: BaseModelClient,
        models: Sequence[str],
        timeout_s: float = 60.0,
        max_concurrency: int = 4,
    ) -> None:
        if not models:
            raise ValueError("at least one model identifier is required")
        self._client = client
        self._models = list(models)
        self._timeout_s = timeout_s
        self._max_concurrency = max_concurrency
        self._semaphore: asyncio.Semaphore | None = None
        self._semaphore_loop: asyncio.AbstractEventLoop | None = None

    @classmethod
    def from_settings(cls, client: BaseModelClient, settings: Settings) -> ModelInvoker:
        return cls(
            client=client,
            models=settings.model_chain,
            timeout_s=settings.llm_timeout_s,
            max_concurrency=settings.llm_max_concurrency,
        )

    @property
    def primary_model(self) -> str:
        return self._models[0]

    @property
    def fallback_model(self) -> str | None:
        return self._models[1] if len(self._models) > 1 else None

    @property
    def supports_vision(self) -> bool:
        return self._client.supports_vision

    async def invoke(self, invocation: ModelInvocation) -> InvocationResult:
        """Run the invocation on the primary model, falling back once.

        Raises:
            ModelError: Primary failed with a non-retryable kind, or with
                ModelNotFound when no fallback is configured.
            ModelUnavailableError: Primary not found and fallback failed.
        """
        primary = self.primary_model
        set_step_context("primary_invoke", model=primary)
        try:
            output = await self._call(primary, invocation)
            return InvocationResult(output=output, model=primary)
        except ModelError as err:
            fallback = self.fallback_model
            if err.kind is not ModelErrorKind.MODEL_NOT_FOUND or fallback is None:
                raise
            primary_error = err

        logger.warning(
            "Model %s not found, trying fallback model %s", primary, fallback,
        )
        set_step_context("fallback_invoke", model=fallback)
        try:
            output = await self._call(fallback, invocation)
        except ModelError as err:
            logger.error("Fallback model %s failed: %s", fallback, err)
            raise ModelUnavailableError([primary_error, err]) from err

        return InvocationResult(
            output=output, model=fallback, used_fallback=True, failures=[primary_error],
        )

    def _get_semaphore(self) -> asyncio.Semaphore:
        """Concurrency cap bound to the running event loop.

        A semaphore belongs to the loop it was first awaited on, so a new one
        is created when the invoker is reused under a different loop.
        """
        loop = asyncio.get_running_loop()
        if self._semaphore is None or self._semaphore_loop is not loop:
            self._semaphore = asyncio.Semaphore(self._max_concurrency)
            self._semaphore_loop = loop
        return self._semaphore

    async def _call(self, model: str, invocation: ModelInvocation) -> ModelOutput:
        async with self._get_semaphore():
            try:
                return await asyncio.wait_for(
                    self._client.invoke(model, invocation), timeout=self._timeout_s,
                )
            except asyncio.TimeoutError as e:
                raise ModelError(
                    ModelErrorKind.OTHER,
                    upstream_message=f"Model call timed out after {self._timeout_s:g}s",
                    model=model,
                ) from e
            except ModelError:
                raise
            except Exception as e:
                raise to_model_error(e, model=model) from e
