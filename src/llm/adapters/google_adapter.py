# src/llm/adapters/google_adapter.py — v2
"""Google Gemini adapter implementing BaseModelClient.

Uses the google-generativeai SDK. Every SDK failure leaves this module as a
classified ModelError so the fallback chain can decide what to retry.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from checkwise.llm.base_client import BaseModelClient
from checkwise.llm.errors import to_model_error
from checkwise.llm.models import ContentPart, ModelInvocation, ModelOutput

logger = logging.getLogger(__name__)


class GeminiClient(BaseModelClient):
    """Google Gemini client, one GenerativeModel per call."""

    def __init__(self, api_key: str = "", **kwargs: Any):
        self._api_key = api_key

    async def invoke(self, model_id: str, invocation: ModelInvocation) -> ModelOutput:
        import google.generativeai as genai

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(model_id)

        gen_config: dict[str, Any] = {}
        if invocation.temperature is not None:
            gen_config["temperature"] = invocation.temperature
        if invocation.max_output_tokens is not None:
            gen_config["max_output_tokens"] = invocation.max_output_tokens

        contents = [
            {"role": "user", "parts": [_to_gemini_part(p) for p in invocation.parts]}
        ]

        t0 = time.monotonic()
        try:
            resp = await model.generate_content_async(
                contents, generation_config=gen_config or None,
            )
            # .text raises ValueError when the candidate was blocked
            text = resp.text or ""
        except Exception as e:
            error = to_model_error(e, model=model_id)
            logger.warning("Gemini call failed: %s", error)
            raise error from e
        latency = int((time.monotonic() - t0) * 1000)

        usage = getattr(resp, "usage_metadata", None)
        return ModelOutput(
            text=text,
            model=model_id,
            provider="google",
            latency_ms=latency,
            input_tokens=_token_count(usage, "prompt_token_count"),
            output_tokens=_token_count(usage, "candidates_token_count"),
            raw_response=resp,
        )

    @property
    def supports_vision(self) -> bool:
        return True

    @property
    def provider_name(self) -> str:
        return "google"


def _to_gemini_part(part: ContentPart) -> dict[str, Any]:
    if part.kind == "inline_data":
        return {"inline_data": {"mime_type": part.mime_type, "data": part.data}}
    return {"text": part.text or ""}


def _token_count(usage: Any, field: str) -> int:
    value = getattr(usage, field, 0) if usage is not None else 0
    return value if isinstance(value, int) else 0
