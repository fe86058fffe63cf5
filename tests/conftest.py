# tests/conftest.py — v2
"""Shared test fixtures for all unit tests.

Provides a controllable clock, a scripted model client, and settings and
orchestrators wired entirely in memory. No network, OCR binary or disk access
unless a test asks for tmp_path.
"""

from __future__ import annotations

from typing import Any, Callable

import pytest

from checkwise.cache.memory_store import MemoryResponseCache
from checkwise.config.settings import Settings
from checkwise.extraction.base_ocr import BaseOcrEngine
from checkwise.llm.base_client import BaseModelClient
from checkwise.llm.fallback import ModelInvoker
from checkwise.llm.models import ModelInvocation, ModelOutput
from checkwise.pipeline.orchestrator import CheckOrchestrator
from checkwise.ratelimit.limiter import FixedWindowRateLimiter
from checkwise.storage.base_image_store import BaseImageStore
from checkwise.storage.memory_record_store import MemoryRecordStore

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32

QUESTION_JSON = (
    '```json\n{"type": "question", "userInput": "What is 2+2?", '
    '"response": "**4**", "explanation": "2 plus 2 is 4.", '
    '"suggestions": ["- Practice addition"]}\n```'
)

IMAGE_JSON = (
    '{"question": "What is 6 x 7?", "studentAnswer": "42", "isCorrect": true, '
    '"correctAnswer": "42", "explanation": "## Correct\\n6 x 7 = 42", '
    '"mistakes": [], "suggestions": ["Keep going"]}'
)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeModelClient(BaseModelClient):
    """Scripted model client.

    ``script`` maps a model id to a list of outcomes consumed in order; an
    outcome is either response text or an exception to raise. The last
    outcome repeats once the list is exhausted.
    """

    def __init__(self, script: dict[str, list[Any]] | None = None) -> None:
        self.script = script or {}
        self.calls: list[tuple[str, ModelInvocation]] = []

    async def invoke(self, model_id: str, invocation: ModelInvocation) -> ModelOutput:
        self.calls.append((model_id, invocation))
        outcomes = self.script.get(model_id, ["{}"])
        index = min(sum(1 for m, _ in self.calls if m == model_id) - 1, len(outcomes) - 1)
        outcome = outcomes[index]
        if isinstance(outcome, BaseException):
            raise outcome
        return ModelOutput(text=outcome, model=model_id, provider="fake", latency_ms=5)

    @property
    def supports_vision(self) -> bool:
        return True

    @property
    def provider_name(self) -> str:
        return "fake"

    def models_called(self) -> list[str]:
        return [m for m, _ in self.calls]


class FakeOcrEngine(BaseOcrEngine):
    def __init__(self, text: str = "", error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls = 0

    async def extract_text(self, image_bytes: bytes) -> str:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.text

    @property
    def engine_name(self) -> str:
        return "fake"


class FakeImageStore(BaseImageStore):
    def __init__(self, url: str = "https://img.example/check_1.png", error: Exception | None = None) -> None:
        self.url = url
        self.error = error
        self.stored: list[str | None] = []

    async def store(self, image_bytes: bytes, filename: str | None) -> str:
        if self.error is not None:
            raise self.error
        self.stored.append(filename)
        return self.url


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any .env file, with in-memory collaborators."""
    return Settings(
        _env_file=None,
        record_store_backend="memory",
        image_store_backend="none",
        ocr_enabled=False,
    )


@pytest.fixture
def make_orchestrator(settings: Settings, clock: FakeClock) -> Callable[..., CheckOrchestrator]:
    """Build an orchestrator around fakes; override any collaborator by keyword."""

    def _make(
        client: BaseModelClient | None = None,
        ocr: BaseOcrEngine | None = None,
        image_store: BaseImageStore | None = None,
        record_store: Any = None,
        cache: Any = None,
        rate_limiter: FixedWindowRateLimiter | None = None,
        timeout_s: float = 5.0,
    ) -> CheckOrchestrator:
        client = client or FakeModelClient()
        return CheckOrchestrator(
            invoker=ModelInvoker(client, settings.model_chain, timeout_s=timeout_s),
            rate_limiter=rate_limiter or FixedWindowRateLimiter(clock=clock),
            cache=cache if cache is not None else MemoryResponseCache(clock=clock),
            ocr=ocr or FakeOcrEngine(),
            image_store=image_store or FakeImageStore(),
            record_store=record_store if record_store is not None else MemoryRecordStore(),
            settings=settings,
        )

    return _make
