# src/pipeline/orchestrator.py — v3
"""Check orchestrator: one inbound request through the full pipeline.

  Validating -> AdmissionCheck -> CacheLookup -> (hit: Done)
  -> [image: OCR + image hosting] -> Building -> PrimaryInvoke
  -> [ModelNotFound: FallbackInvoke] -> Parsing/Sanitizing
  -> Persisting -> CacheStore -> Done

Only validation, admission and unrecovered model failures reach the caller.
OCR, image hosting and persistence failures are logged and absorbed, and a
parse failure degrades to a text-only result.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from checkwise.cache.fingerprint import derive_cache_key
from checkwise.config.settings import Settings
from checkwise.core.errors import AdmissionDenied, ValidationError
from checkwise.core.models import (
    DEFAULT_IMAGE_INSTRUCTION,
    AnalysisMode,
    AnalysisRequest,
    CheckData,
)
from checkwise.extraction.media_types import detect_media_type, is_image_media_type
from checkwise.llm.models import ModelInvocation
from checkwise.logging.context import clear_context, set_request_context, set_step_context
from checkwise.parsing.response_parser import parse_response
from checkwise.prompts.builder import build_prompt

if TYPE_CHECKING:
    from checkwise.cache.base_cache_store import BaseResponseCache
    from checkwise.extraction.base_ocr import BaseOcrEngine
    from checkwise.llm.base_client import BaseModelClient
    from checkwise.llm.fallback import ModelInvoker
    from checkwise.ratelimit.limiter import FixedWindowRateLimiter
    from checkwise.storage.base_image_store import BaseImageStore
    from checkwise.storage.base_record_store import BaseRecordStore

logger = logging.getLogger(__name__)


@dataclass
class CheckOutcome:
    """Successful pipeline result handed to the API layer."""

    data: CheckData
    mode: AnalysisMode
    cached: bool = False
    used_fallback: bool = False
    model: str | None = None
    degraded: bool = False


def validate_request(request: AnalysisRequest, settings: Settings | None = None) -> AnalysisRequest:
    """Reject unusable requests and fill in a missing image MIME type.

    Raises:
        ValidationError: No prompt and no image, a non-image upload, or an
            upload over the size limit.
    """
    if not request.has_prompt and not request.has_image:
        raise ValidationError()

    if not request.has_image:
        return request

    media_type = request.image_mime_type or detect_media_type(
        request.image_filename, request.image_bytes
    )
    if not is_image_media_type(media_type):
        raise ValidationError("Only image files are allowed!")

    max_bytes = (settings or Settings(_env_file=None)).max_image_size_bytes
    if len(request.image_bytes or b"") > max_bytes:
        raise ValidationError(
            f"Image exceeds the maximum upload size of {max_bytes // (1024 * 1024)} MB"
        )

    if media_type != request.image_mime_type:
        return request.model_copy(update={"image_mime_type": media_type})
    return request


class CheckOrchestrator:
    """Compose admission, cache, prompt, model chain, parsing and storage.

    The rate limiter and response cache are the only shared mutable state;
    neither awaits mid-update, so concurrent requests need no extra locking.

    Args:
        invoker: Primary/fallback model chain.
        rate_limiter: Process-wide admission control.
        cache: Response cache.
        ocr: OCR engine for image requests.
        image_store: Image hosting.
        record_store: Check persistence.
        settings: Application settings.
    """

    def __init__(
        self,
        invoker: ModelInvoker,
        rate_limiter: FixedWindowRateLimiter,
        cache: BaseResponseCache,
        ocr: BaseOcrEngine,
        image_store: BaseImageStore,
        record_store: BaseRecordStore,
        settings: Settings | None = None,
    ) -> None:
        self._invoker = invoker
        self._rate_limiter = rate_limiter
        self._cache = cache
        self._ocr = ocr
        self._image_store = image_store
        self._record_store = record_store
        self._settings = settings or Settings(_env_file=None)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client: BaseModelClient | None = None,
        record_store: BaseRecordStore | None = None,
    ) -> CheckOrchestrator:
        """Wire every collaborator from configuration."""
        from checkwise.cache.cache_factory import create_response_cache
        from checkwise.extraction.ocr_factory import create_ocr_engine
        from checkwise.llm.client_factory import create_model_client
        from checkwise.llm.fallback import ModelInvoker
        from checkwise.ratelimit.limiter import FixedWindowRateLimiter
        from checkwise.storage.store_factory import create_image_store, create_record_store

        client = client or create_model_client(settings.llm_provider, settings)
        return cls(
            invoker=ModelInvoker.from_settings(client, settings),
            rate_limiter=FixedWindowRateLimiter.from_settings(settings),
            cache=create_response_cache(settings),
            ocr=create_ocr_engine(settings),
            image_store=create_image_store(settings),
            record_store=record_store or create_record_store(settings),
            settings=settings,
        )

    @property
    def record_store(self) -> BaseRecordStore:
        return self._record_store

    async def run(self, request: AnalysisRequest) -> CheckOutcome:
        """Process one check request.

        Raises:
            ValidationError: Neither prompt nor image, or a bad upload,
                or an image the configured provider cannot read.
            AdmissionDenied: Rate limit reached.
            ModelError: Quota, credential or unclassified model failure.
            ModelUnavailableError: No model in the chain could answer.
        """
        clear_context()
        request_id = uuid.uuid4().hex[:12]
        set_request_context(request_id)
        set_step_context("validating")
        request = validate_request(request, self._settings)
        if request.has_image and not self._invoker.supports_vision:
            raise ValidationError(
                "Image analysis is not supported by the configured model provider"
            )
        mode = request.mode
        set_request_context(request_id, mode.value)

        set_step_context("admission_check")
        if not self._rate_limiter.admit():
            raise AdmissionDenied()

        set_step_context("cache_lookup")
        cache_key = derive_cache_key(request, self._settings)
        cached = self._cache.get(cache_key)
        if cached is not None:
            logger.info("Returning cached result for %s request", mode.value)
            return CheckOutcome(data=cached, mode=mode, cached=True)

        logger.info("Processing %s request", mode.value)
        extracted_text = ""
        image_url = ""
        if request.has_image:
            extracted_text = await self._extract_text(request.image_bytes or b"")
            image_url = await self._store_image(request)

        set_step_context("building")
        built = build_prompt(request.prompt, extracted_text, request.has_image)
        invocation = ModelInvocation.build(
            built.text,
            image=request.image_bytes,
            image_mime_type=request.image_mime_type,
            temperature=self._settings.llm_temperature,
            max_output_tokens=self._settings.llm_max_output_tokens,
        )

        result = await self._invoker.invoke(invocation)

        set_step_context("parsing")
        parsed = parse_response(
            result.output.text,
            mode,
            prompt_text=request.prompt,
            extracted_text=extracted_text,
        )

        set_step_context("persisting")
        record_id = await self._persist(
            prompt=request.prompt or DEFAULT_IMAGE_INSTRUCTION,
            image_url=image_url,
            extracted_text=extracted_text,
            analysis=parsed.result,
        )

        data = CheckData(
            id=record_id,
            analysis=parsed.result,
            image_url=image_url if request.has_image else None,
            extracted_text=extracted_text if request.has_image else None,
        )

        set_step_context("cache_store")
        self._cache.set(cache_key, data)

        logger.info(
            "Check complete: model=%s, fallback=%s, degraded=%s, latency_ms=%d",
            result.model, result.used_fallback, parsed.degraded, result.output.latency_ms,
        )
        return CheckOutcome(
            data=data,
            mode=mode,
            used_fallback=result.used_fallback,
            model=result.model,
            degraded=parsed.degraded,
        )

    async def _extract_text(self, image_bytes: bytes) -> str:
        set_step_context("ocr")
        try:
            text = await self._ocr.extract_text(image_bytes)
        except Exception as e:
            logger.warning("OCR failed, continuing without extracted text: %s", e)
            return ""
        logger.debug("OCR extracted %d characters", len(text))
        return text

    async def _store_image(self, request: AnalysisRequest) -> str:
        set_step_context("image_hosting")
        try:
            return await self._image_store.store(
                request.image_bytes or b"", request.image_filename
            )
        except Exception as e:
            logger.warning("Image upload failed, continuing without URL: %s", e)
            return ""

    async def _persist(
        self,
        prompt: str,
        image_url: str,
        extracted_text: str,
        analysis: dict[str, Any],
    ) -> str | None:
        try:
            return await self._record_store.create(
                prompt=prompt,
                image_url=image_url,
                extracted_text=extracted_text,
                result=analysis,
            )
        except Exception as e:
            logger.error("Failed to persist check record: %s", e, exc_info=True)
            return None
