# src/logging/context.py — v2
"""Contextual logging support: attach request_id, mode, model to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per inbound check request.
_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_mode: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "mode", default=None
)
_model: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "model", default=None
)
_step: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "step", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    request_id: str | None = None
    mode: str | None = None
    model: str | None = None
    step: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        request_id=_request_id.get(),
        mode=_mode.get(),
        model=_model.get(),
        step=_step.get(),
    )


def set_request_context(request_id: str, mode: str | None = None) -> None:
    """Set request-level context (called once per check request)."""
    _request_id.set(request_id)
    _mode.set(mode)


def set_step_context(step: str, model: str | None = None) -> None:
    """Set pipeline step context (called on each state transition)."""
    _step.set(step)
    if model is not None:
        _model.set(model)


def clear_context() -> None:
    """Reset all context variables."""
    _request_id.set(None)
    _mode.set(None)
    _model.set(None)
    _step.set(None)
