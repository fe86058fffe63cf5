# tests/unit/api/test_unit_models.py — v1
"""Tests for api/models.py."""

from __future__ import annotations

from checkwise.api.models import CheckResponse
from checkwise.core.errors import ModelError, ModelErrorKind, ValidationError


class TestCheckResponse:
    def test_ok_body(self):
        body = CheckResponse.ok("done", data={"analysis": {"x": None}}).to_body()
        assert body == {"success": True, "message": "done", "data": {"analysis": {"x": None}}}

    def test_ok_cached(self):
        assert CheckResponse.ok("done", cached=True).to_body()["cached"] is True

    def test_ok_with_count(self):
        body = CheckResponse.ok("listed", data=[], count=0).to_body()
        assert body["count"] == 0
        assert body["data"] == []

    def test_from_error(self):
        response = CheckResponse.from_error(ValidationError("Only image files are allowed!"))
        assert response.status_code == 400
        assert response.to_body() == {
            "success": False,
            "message": "Only image files are allowed!",
            "error": "VALIDATION_ERROR",
        }

    def test_from_model_error_with_details(self):
        response = CheckResponse.from_error(ModelError(ModelErrorKind.OTHER, "socket closed"))
        assert response.status_code == 500
        assert response.to_body()["details"] == "socket closed"

    def test_status_code_not_in_body(self):
        assert "status_code" not in CheckResponse.ok("x").to_body()
