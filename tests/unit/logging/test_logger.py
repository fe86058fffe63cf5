# tests/unit/logging/test_logger.py — v1
"""Tests for logging/logger.py — logger factory and formatters."""

from __future__ import annotations

import json
import logging
import sys

from checkwise.logging.context import clear_context, set_request_context, set_step_context
from checkwise.logging.logger import JsonFormatter, TextFormatter, get_logger, setup_logging


def _record(msg: str, exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="test", level=logging.INFO, pathname="", lineno=0,
        msg=msg, args=(), exc_info=exc_info,
    )


class TestJsonFormatter:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        parsed = json.loads(JsonFormatter().format(_record("Hello")))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Hello"
        assert "timestamp" in parsed
        assert "context" not in parsed

    def test_format_with_context(self):
        set_request_context("req1", "prompt_only")
        set_step_context("primary_invoke", model="gemini-2.5-flash")
        parsed = json.loads(JsonFormatter().format(_record("calling")))
        assert parsed["context"] == {
            "request_id": "req1",
            "mode": "prompt_only",
            "model": "gemini-2.5-flash",
            "step": "primary_invoke",
        }

    def test_extra_data(self):
        record = _record("x")
        record.data = {"latency_ms": 12}
        parsed = json.loads(JsonFormatter().format(record))
        assert parsed["data"] == {"latency_ms": 12}

    def test_exception(self):
        try:
            raise RuntimeError("bad")
        except RuntimeError:
            record = _record("failed", exc_info=sys.exc_info())
        parsed = json.loads(JsonFormatter().format(record))
        assert "RuntimeError: bad" in parsed["exception"]


class TestTextFormatter:
    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        output = TextFormatter().format(_record("Hello text"))
        assert "Hello text" in output
        assert "INFO" in output

    def test_includes_request_and_step(self):
        set_request_context("abc123")
        set_step_context("ocr")
        output = TextFormatter().format(_record("reading"))
        assert "[abc123]" in output
        assert "(ocr)" in output


class TestGetLogger:
    def test_returns_logger(self):
        assert get_logger("test_module").name == "checkwise.test_module"


class TestSetupLogging:
    def teardown_method(self):
        root = logging.getLogger("checkwise")
        for handler in root.handlers:
            handler.close()
        root.handlers.clear()
        root.setLevel(logging.NOTSET)

    def test_setup_json(self):
        setup_logging(level="DEBUG", log_format="json")
        root = logging.getLogger("checkwise")
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_setup_text(self):
        setup_logging(level="INFO", log_format="text")
        root = logging.getLogger("checkwise")
        assert root.level == logging.INFO
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_setup_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "checkwise.log"
        setup_logging(log_file=str(log_file))
        root = logging.getLogger("checkwise")
        assert len(root.handlers) == 2
        root.info("hello file")
        for handler in root.handlers:
            handler.flush()
        assert "hello file" in log_file.read_text(encoding="utf-8")

    def test_no_duplicate_handlers(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger("checkwise").handlers) == 1
