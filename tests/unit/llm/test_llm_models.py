# tests/unit/llm/test_llm_models.py — v1
"""Tests for llm/models.py."""

from __future__ import annotations

from checkwise.llm.models import ContentPart, ModelInvocation, ModelOutput


class TestModelInvocation:
    def test_text_only(self):
        inv = ModelInvocation.build("hello")
        assert [p.kind for p in inv.parts] == ["text"]
        assert inv.has_image is False

    def test_image_first(self):
        inv = ModelInvocation.build("check", image=b"abc", image_mime_type="image/jpeg")
        assert [p.kind for p in inv.parts] == ["inline_data", "text"]
        assert inv.parts[0].mime_type == "image/jpeg"
        assert inv.has_image is True

    def test_default_image_mime(self):
        inv = ModelInvocation.build("check", image=b"abc")
        assert inv.parts[0].mime_type == "image/png"

    def test_generation_options(self):
        inv = ModelInvocation.build("x", temperature=0.1)
        assert inv.temperature == 0.1
        assert inv.max_output_tokens is None


class TestContentPart:
    def test_from_text(self):
        part = ContentPart.from_text("hi")
        assert part.kind == "text"
        assert part.data is None

    def test_from_bytes(self):
        part = ContentPart.from_bytes(b"x", "image/gif")
        assert (part.kind, part.data, part.mime_type) == ("inline_data", b"x", "image/gif")


def test_model_output_defaults():
    out = ModelOutput(text="{}", model="m", provider="google")
    assert out.latency_ms == 0
    assert out.input_tokens == 0
