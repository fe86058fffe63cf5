# src/llm/errors.py — v1
"""Map upstream model failures onto ModelErrorKind.

Structured signals win: an HTTP-like status code on the exception (or its
``response``), then the exception type name. Substring matching on the
message is a best-effort last resort for SDKs that only expose text.
"""

from __future__ import annotations

from checkwise.core.errors import ModelError, ModelErrorKind

_STATUS_KINDS: dict[int, ModelErrorKind] = {
    429: ModelErrorKind.QUOTA_EXCEEDED,
    401: ModelErrorKind.INVALID_CREDENTIALS,
    403: ModelErrorKind.INVALID_CREDENTIALS,
    404: ModelErrorKind.MODEL_NOT_FOUND,
}

_TYPE_KINDS: dict[str, ModelErrorKind] = {
    "resourceexhausted": ModelErrorKind.QUOTA_EXCEEDED,
    "toomanyrequests": ModelErrorKind.QUOTA_EXCEEDED,
    "ratelimiterror": ModelErrorKind.QUOTA_EXCEEDED,
    "unauthenticated": ModelErrorKind.INVALID_CREDENTIALS,
    "unauthorized": ModelErrorKind.INVALID_CREDENTIALS,
    "permissiondenied": ModelErrorKind.INVALID_CREDENTIALS,
    "authenticationerror": ModelErrorKind.INVALID_CREDENTIALS,
    "notfound": ModelErrorKind.MODEL_NOT_FOUND,
}

# Checked in order; the first matching group wins.
_TEXT_KINDS: list[tuple[ModelErrorKind, tuple[str, ...]]] = [
    (ModelErrorKind.QUOTA_EXCEEDED, ("quota", "429", "resource_exhausted", "rate limit")),
    (ModelErrorKind.INVALID_CREDENTIALS, ("api key", "401", "unauthenticated")),
    (ModelErrorKind.MODEL_NOT_FOUND, ("404", "not found")),
]


def _status_code(error: BaseException) -> int | None:
    """Extract an HTTP-like status code from an exception, if any."""
    candidates = [error, getattr(error, "response", None)]
    for obj in candidates:
        if obj is None:
            continue
        for attr in ("status_code", "code", "status"):
            value = getattr(obj, attr, None)
            if isinstance(value, bool):
                continue
            if isinstance(value, int):
                return int(value)
            if isinstance(value, str) and value.isdigit():
                return int(value)
    return None


def classify_model_error(error: BaseException) -> ModelErrorKind:
    """Classify an upstream exception into a ModelErrorKind."""
    if isinstance(error, ModelError):
        return error.kind

    status = _status_code(error)
    if status is not None and status in _STATUS_KINDS:
        return _STATUS_KINDS[status]

    for cls in type(error).__mro__:
        kind = _TYPE_KINDS.get(cls.__name__.lower())
        if kind is not None:
            return kind

    msg = str(error).lower()
    for kind, needles in _TEXT_KINDS:
        if any(n in msg for n in needles):
            return kind
    return ModelErrorKind.OTHER


def to_model_error(error: BaseException, model: str | None = None) -> ModelError:
    """Wrap any exception as a classified ModelError."""
    if isinstance(error, ModelError):
        return error
    return ModelError(
        classify_model_error(error),
        upstream_message=str(error) or type(error).__name__,
        model=model,
    )
