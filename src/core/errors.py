# src/core/errors.py — v1
"""Error taxonomy for the check pipeline.

Every user-visible failure is a CheckError carrying the error code, HTTP
status and static public message the API layer renders. Upstream text is
only exposed through ``details`` for unclassified model failures.
"""

from __future__ import annotations

from enum import Enum


class CheckError(Exception):
    """Base class for all pipeline errors with a rendered response."""

    code: str = "INTERNAL_ERROR"
    status_code: int = 500
    public_message: str = "Failed to process request"

    def __init__(self, message: str | None = None, details: str | None = None) -> None:
        self.message = message or self.public_message
        self.details = details
        super().__init__(self.message)


class ValidationError(CheckError):
    """Request carries no usable input (or an unacceptable upload)."""

    code = "VALIDATION_ERROR"
    status_code = 400
    public_message = "Please provide either an image, a prompt, or both"


class AdmissionDenied(CheckError):
    """Rate limiter rejected the request before any upstream cost."""

    code = "RATE_LIMIT_EXCEEDED"
    status_code = 429
    public_message = "Rate limit exceeded. Please try again in a minute."


class ModelErrorKind(str, Enum):
    """Classified upstream failure."""

    QUOTA_EXCEEDED = "QuotaExceeded"
    INVALID_CREDENTIALS = "InvalidCredentials"
    MODEL_NOT_FOUND = "ModelNotFound"
    OTHER = "Other"


# kind -> (code, status, public message, static details)
_MODEL_ERROR_RENDERING: dict[ModelErrorKind, tuple[str, int, str, str | None]] = {
    ModelErrorKind.QUOTA_EXCEEDED: (
        "QUOTA_EXCEEDED",
        429,
        "AI service quota exceeded. Please try again later or upgrade your API plan.",
        "Daily limit reached for free tier. Consider upgrading to paid plan.",
    ),
    ModelErrorKind.INVALID_CREDENTIALS: (
        "INVALID_API_KEY",
        401,
        "Invalid API key configuration",
        None,
    ),
    ModelErrorKind.MODEL_NOT_FOUND: (
        "MODEL_NOT_AVAILABLE",
        503,
        "AI model not available. Please check your API key or try again later.",
        None,
    ),
    ModelErrorKind.OTHER: (
        "INTERNAL_ERROR",
        500,
        "Failed to process request",
        None,
    ),
}


class ModelError(CheckError):
    """Classified failure of a single generative model call."""

    def __init__(
        self,
        kind: ModelErrorKind,
        upstream_message: str = "",
        model: str | None = None,
    ) -> None:
        self.kind = kind
        self.upstream_message = upstream_message
        self.model = model
        code, status, public, details = _MODEL_ERROR_RENDERING[kind]
        self.code = code
        self.status_code = status
        self.public_message = public
        if kind is ModelErrorKind.OTHER:
            details = upstream_message or None
        super().__init__(public, details=details)

    def __str__(self) -> str:
        where = f" ({self.model})" if self.model else ""
        return f"{self.kind.value}{where}: {self.upstream_message or self.message}"


class ModelUnavailableError(CheckError):
    """No model in the fallback chain could serve the request."""

    code = "MODEL_NOT_AVAILABLE"
    status_code = 503
    public_message = "AI model not available. Please check your API key or try again later."

    def __init__(self, attempts: list[ModelError] | None = None) -> None:
        self.attempts = list(attempts or [])
        super().__init__()


class PersistenceError(CheckError):
    """Check record could not be stored. Absorbed by the orchestrator."""

    code = "PERSISTENCE_ERROR"
    public_message = "Failed to store check record"


class RecordNotFoundError(CheckError):
    """Requested check record does not exist."""

    code = "NOT_FOUND"
    status_code = 404
    public_message = "Check not found"
