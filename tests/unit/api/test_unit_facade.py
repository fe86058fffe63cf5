# tests/unit/api/test_unit_facade.py — v2
"""Tests for api/facade.py — rendered responses for every outcome."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from conftest import IMAGE_JSON, PNG_BYTES, QUESTION_JSON, FakeModelClient, FakeOcrEngine
from checkwise.api import facade
from checkwise.api.facade import check, delete_check, get_check, list_checks
from checkwise.core.errors import ModelError, ModelErrorKind
from checkwise.ratelimit.limiter import FixedWindowRateLimiter

PRIMARY = "gemini-2.5-flash"
FALLBACK = "gemini-2.0-flash"


class TestCheck:
    @pytest.mark.asyncio
    async def test_prompt_success(self, make_orchestrator):
        orch = make_orchestrator(client=FakeModelClient({PRIMARY: [QUESTION_JSON]}))
        response = await check(prompt="What is 2+2?", orchestrator=orch)
        body = response.to_body()
        assert response.status_code == 200
        assert body["success"] is True
        assert body["message"] == "Prompt analyzed successfully"
        assert body["data"]["analysis"]["response"] == "4"
        assert "id" in body["data"]
        assert "cached" not in body
        assert "imageUrl" not in body["data"]

    @pytest.mark.asyncio
    async def test_cached_response(self, make_orchestrator):
        orch = make_orchestrator(client=FakeModelClient({PRIMARY: [QUESTION_JSON]}))
        first = await check(prompt="What is 2+2?", orchestrator=orch)
        second = await check(prompt="What is 2+2?", orchestrator=orch)
        body = second.to_body()
        assert body["cached"] is True
        assert body["message"] == "Prompt analyzed successfully (cached)"
        assert body["data"] == first.to_body()["data"]

    @pytest.mark.asyncio
    async def test_image_success(self, make_orchestrator):
        orch = make_orchestrator(
            client=FakeModelClient({PRIMARY: [IMAGE_JSON]}),
            ocr=FakeOcrEngine(text="Answer: 42"),
        )
        response = await check(image=PNG_BYTES, image_filename="hw.png", orchestrator=orch)
        body = response.to_body()
        assert body["message"] == "Image analyzed successfully"
        assert body["data"]["extractedText"] == "Answer: 42"
        assert body["data"]["imageUrl"].startswith("https://")
        assert body["data"]["analysis"]["isCorrect"] is True

    @pytest.mark.asyncio
    async def test_fallback_message(self, make_orchestrator):
        client = FakeModelClient({
            PRIMARY: [ModelError(ModelErrorKind.MODEL_NOT_FOUND, "404")],
            FALLBACK: [QUESTION_JSON],
        })
        response = await check(prompt="q", orchestrator=make_orchestrator(client=client))
        assert response.message == "Prompt analyzed successfully (using fallback model)"

    @pytest.mark.asyncio
    async def test_validation_error(self, make_orchestrator):
        response = await check(prompt="  ", orchestrator=make_orchestrator())
        assert response.status_code == 400
        assert response.to_body() == {
            "success": False,
            "message": "Please provide either an image, a prompt, or both",
            "error": "VALIDATION_ERROR",
        }

    @pytest.mark.asyncio
    async def test_rate_limited(self, make_orchestrator, clock):
        orch = make_orchestrator(rate_limiter=FixedWindowRateLimiter(max_requests=1, clock=clock))
        await check(prompt="a", orchestrator=orch)
        response = await check(prompt="b", orchestrator=orch)
        assert response.status_code == 429
        assert response.error == "RATE_LIMIT_EXCEEDED"
        assert response.message == "Rate limit exceeded. Please try again in a minute."

    @pytest.mark.asyncio
    async def test_quota_exceeded(self, make_orchestrator):
        client = FakeModelClient({PRIMARY: [RuntimeError("429 quota")]})
        response = await check(prompt="q", orchestrator=make_orchestrator(client=client))
        body = response.to_body()
        assert response.status_code == 429
        assert body["error"] == "QUOTA_EXCEEDED"
        assert body["message"] == (
            "AI service quota exceeded. Please try again later or upgrade your API plan."
        )
        assert body["details"] == "Daily limit reached for free tier. Consider upgrading to paid plan."

    @pytest.mark.asyncio
    async def test_invalid_key(self, make_orchestrator):
        client = FakeModelClient({PRIMARY: [RuntimeError("API key not valid")]})
        response = await check(prompt="q", orchestrator=make_orchestrator(client=client))
        assert response.status_code == 401
        assert response.error == "INVALID_API_KEY"
        assert response.message == "Invalid API key configuration"

    @pytest.mark.asyncio
    async def test_model_unavailable(self, make_orchestrator):
        client = FakeModelClient({
            PRIMARY: [ModelError(ModelErrorKind.MODEL_NOT_FOUND, "404")],
            FALLBACK: [RuntimeError("boom")],
        })
        response = await check(prompt="q", orchestrator=make_orchestrator(client=client))
        assert response.status_code == 503
        assert response.error == "MODEL_NOT_AVAILABLE"

    @pytest.mark.asyncio
    async def test_other_model_error(self, make_orchestrator):
        client = FakeModelClient({PRIMARY: [RuntimeError("connection reset")]})
        response = await check(prompt="q", orchestrator=make_orchestrator(client=client))
        assert response.status_code == 500
        assert response.message == "Failed to process request"
        assert response.details == "connection reset"

    @pytest.mark.asyncio
    async def test_unexpected_error(self):
        orch = MagicMock()
        orch.run = AsyncMock(side_effect=KeyError("boom"))
        response = await check(prompt="q", orchestrator=orch)
        assert response.status_code == 500
        assert response.error == "INTERNAL_ERROR"
        assert response.success is False


class TestRecords:
    @pytest.mark.asyncio
    async def test_list_get_delete(self, make_orchestrator):
        orch = make_orchestrator(client=FakeModelClient({PRIMARY: [QUESTION_JSON]}))
        created = await check(prompt="What is 2+2?", orchestrator=orch)
        record_id = created.data["id"]

        listed = await list_checks(orchestrator=orch)
        assert listed.message == "Checks fetched successfully"
        assert listed.count == 1
        assert listed.data[0]["id"] == record_id
        assert listed.data[0]["prompt"] == "What is 2+2?"
        assert "createdAt" in listed.data[0]

        fetched = await get_check(record_id, orchestrator=orch)
        assert fetched.status_code == 200
        assert fetched.data["result"]["response"] == "4"

        deleted = await delete_check(record_id, orchestrator=orch)
        assert deleted.message == "Check deleted successfully"

        missing = await get_check(record_id, orchestrator=orch)
        assert missing.status_code == 404
        assert missing.message == "Check not found"

    @pytest.mark.asyncio
    async def test_delete_missing(self, make_orchestrator):
        response = await delete_check("nope", orchestrator=make_orchestrator())
        assert response.status_code == 404
        assert response.error == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_store_failure(self):
        orch = MagicMock()
        orch.record_store.list_all = AsyncMock(side_effect=OSError("disk gone"))
        response = await list_checks(orchestrator=orch)
        assert response.status_code == 500
        assert response.message == "Failed to fetch checks"
        assert response.details == "disk gone"


class TestDefaultOrchestrator:
    def test_singleton(self, settings):
        facade.reset_orchestrator()
        try:
            with patch("checkwise.llm.client_factory.create_model_client", return_value=FakeModelClient()):
                first = facade.get_orchestrator(settings)
                second = facade.get_orchestrator()
            assert first is second
        finally:
            facade.reset_orchestrator()


class TestBrokenConfiguration:
    @pytest.fixture
    def conflicting_models(self, monkeypatch):
        monkeypatch.setenv("LLM_PRIMARY_MODEL", PRIMARY)
        monkeypatch.setenv("LLM_FALLBACK_MODEL", PRIMARY)
        facade.reset_orchestrator()
        yield
        facade.reset_orchestrator()

    @pytest.mark.asyncio
    async def test_check_renders_internal_error(self, conflicting_models):
        response = await check(prompt="What is 2+2?")
        assert response.status_code == 500
        assert response.error == "INTERNAL_ERROR"
        assert "LLM_FALLBACK_MODEL" in response.details

    @pytest.mark.asyncio
    async def test_list_renders_internal_error(self, conflicting_models):
        response = await list_checks()
        assert response.status_code == 500
        assert response.error == "INTERNAL_ERROR"
        assert "LLM_FALLBACK_MODEL" in response.details

    @pytest.mark.asyncio
    async def test_get_and_delete_render_internal_error(self, conflicting_models):
        for response in (await get_check("abc"), await delete_check("abc")):
            assert response.status_code == 500
            assert "LLM_FALLBACK_MODEL" in response.details

    @pytest.mark.asyncio
    async def test_invalid_request_fields_render_internal_error(self, make_orchestrator):
        response = await check(prompt=123, orchestrator=make_orchestrator())  # type: ignore[arg-type]
        assert response.status_code == 500
        assert response.success is False
