# src/api/models.py — v2
"""API-level models: the HTTP response contract rendered as data."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from checkwise.core.errors import CheckError


class CheckResponse(BaseModel):
    """Status code plus JSON body for any facade call.

    Success bodies carry ``{success, message, data, cached?}``; failure
    bodies carry ``{success, message, error, details?}``.
    """

    status_code: int = 200
    success: bool
    message: str
    data: Any = None
    count: int | None = None
    cached: bool | None = None
    error: str | None = None
    details: str | None = None

    @classmethod
    def ok(
        cls,
        message: str,
        data: Any = None,
        cached: bool = False,
        count: int | None = None,
    ) -> CheckResponse:
        return cls(
            status_code=200,
            success=True,
            message=message,
            data=data,
            count=count,
            cached=True if cached else None,
        )

    @classmethod
    def from_error(cls, error: CheckError) -> CheckResponse:
        return cls(
            status_code=error.status_code,
            success=False,
            message=error.message,
            error=error.code,
            details=error.details,
        )

    def to_body(self) -> dict[str, Any]:
        """JSON body without the status code and unset top-level fields."""
        body = self.model_dump(exclude={"status_code"})
        return {k: v for k, v in body.items() if v is not None}
