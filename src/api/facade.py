# src/api/facade.py — v3
"""Public API facade: single entry point for checks and check records.

Usage:
    from checkwise.api.facade import check
    response = await check(prompt="What is 2+2?")
    response.status_code, response.to_body()

The default orchestrator is process-wide so that every caller shares one
rate-limit window and one response cache.
"""

from __future__ import annotations

import logging

from checkwise.api.models import CheckResponse
from checkwise.config.settings import Settings
from checkwise.core.errors import CheckError, RecordNotFoundError
from checkwise.core.models import AnalysisMode, AnalysisRequest
from checkwise.pipeline.orchestrator import CheckOrchestrator, CheckOutcome
from checkwise.storage.base_record_store import BaseRecordStore

logger = logging.getLogger(__name__)

_default_orchestrator: CheckOrchestrator | None = None


def get_orchestrator(settings: Settings | None = None) -> CheckOrchestrator:
    """Return the process-wide orchestrator, building it on first use."""
    global _default_orchestrator
    if _default_orchestrator is None:
        _default_orchestrator = CheckOrchestrator.from_settings(settings or Settings())
    return _default_orchestrator


def reset_orchestrator() -> None:
    """Drop the process-wide orchestrator (rate window and cache included)."""
    global _default_orchestrator
    _default_orchestrator = None


async def check(
    prompt: str | None = None,
    image: bytes | None = None,
    image_filename: str | None = None,
    image_mime_type: str | None = None,
    orchestrator: CheckOrchestrator | None = None,
    settings: Settings | None = None,
) -> CheckResponse:
    """Analyze a prompt, an image, or both.

    Args:
        prompt: Student question, answer to check, or instruction for the image.
        image: Raw image bytes of the student's work.
        image_filename: Original upload filename.
        image_mime_type: Upload MIME type (detected if omitted).
        orchestrator: Pipeline to use. Defaults to the process-wide one.
        settings: Settings for building the default orchestrator.

    Returns:
        CheckResponse; failures are rendered, never raised.
    """
    try:
        orchestrator = orchestrator or get_orchestrator(settings)
        request = AnalysisRequest(
            prompt_text=prompt,
            image_bytes=image,
            image_filename=image_filename,
            image_mime_type=image_mime_type,
        )
        outcome = await orchestrator.run(request)
    except CheckError as e:
        logger.warning("Check failed: %s (%s)", e.code, e)
        return CheckResponse.from_error(e)
    except Exception as e:
        logger.exception("Unexpected error while processing check")
        return CheckResponse(
            status_code=500,
            success=False,
            message="Failed to process request",
            error="INTERNAL_ERROR",
            details=str(e),
        )

    return CheckResponse.ok(
        _success_message(outcome), outcome.data.to_body(), cached=outcome.cached,
    )


async def list_checks(orchestrator: CheckOrchestrator | None = None) -> CheckResponse:
    """List stored check records, newest first."""
    try:
        records = await _record_store(orchestrator).list_all()
    except Exception as e:
        logger.exception("Failed to list checks")
        return _store_failure("Failed to fetch checks", e)
    return CheckResponse.ok(
        "Checks fetched successfully",
        data=[r.to_body() for r in records],
        count=len(records),
    )


async def get_check(
    record_id: str, orchestrator: CheckOrchestrator | None = None
) -> CheckResponse:
    """Fetch one stored check record."""
    try:
        record = await _record_store(orchestrator).get(record_id)
    except Exception as e:
        logger.exception("Failed to fetch check %s", record_id)
        return _store_failure("Failed to fetch check", e)
    if record is None:
        return CheckResponse.from_error(RecordNotFoundError())
    return CheckResponse.ok("Check fetched successfully", data=record.to_body())


async def delete_check(
    record_id: str, orchestrator: CheckOrchestrator | None = None
) -> CheckResponse:
    """Delete one stored check record."""
    try:
        deleted = await _record_store(orchestrator).delete(record_id)
    except Exception as e:
        logger.exception("Failed to delete check %s", record_id)
        return _store_failure("Failed to delete check", e)
    if not deleted:
        return CheckResponse.from_error(RecordNotFoundError())
    return CheckResponse.ok("Check deleted successfully")


def _record_store(orchestrator: CheckOrchestrator | None) -> BaseRecordStore:
    return (orchestrator or get_orchestrator()).record_store


def _success_message(outcome: CheckOutcome) -> str:
    subject = "Prompt" if outcome.mode is AnalysisMode.PROMPT_ONLY else "Image"
    message = f"{subject} analyzed successfully"
    if outcome.cached:
        return f"{message} (cached)"
    if outcome.used_fallback:
        return f"{message} (using fallback model)"
    return message


def _store_failure(message: str, error: Exception) -> CheckResponse:
    return CheckResponse(
        status_code=500,
        success=False,
        message=message,
        error="INTERNAL_ERROR",
        details=str(error),
    )
