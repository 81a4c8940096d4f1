"""Focused tests for genai_providers.base.logging.

Covers:
- _parse_level string parsing
- the GENAI_LOG_LEVEL environment override
- normalized_log_event emits required keys
- _coerce_tokens stability
- JsonFormatter output shape
"""
from __future__ import annotations

import json
import logging

from genai_providers.base.logging import (
    BASE_LOGGER_NAME,
    REQUIRED_NORMALIZED_KEYS,
    _parse_level,  # type: ignore[attr-defined]
    configure_logger,
    get_logger,
    log_event,
    normalized_log_event,
)
from genai_providers.base.log_support import JsonFormatter, LogContext
from genai_providers.tests.utils import events_named


def test_parse_level_variants():
    assert _parse_level(None) == logging.INFO  # nosec B101
    assert _parse_level("debug") == logging.DEBUG  # nosec B101
    assert _parse_level("WARN") == logging.WARNING  # nosec B101
    assert _parse_level("unknown", default=logging.ERROR) == logging.ERROR  # nosec B101


def test_child_loggers_share_the_base_logger():
    child = get_logger("gemini.transport")
    assert child.name == f"{BASE_LOGGER_NAME}.gemini.transport"  # nosec B101
    assert child.propagate and not child.handlers  # nosec B101
    assert get_logger(BASE_LOGGER_NAME).propagate is False  # nosec B101


def test_env_level_is_applied(monkeypatch):
    monkeypatch.setenv("GENAI_LOG_LEVEL", "error")
    base = get_logger(BASE_LOGGER_NAME)
    assert base.level == logging.ERROR  # nosec B101
    monkeypatch.setenv("GENAI_LOG_LEVEL", "DEBUG")
    assert get_logger("x").isEnabledFor(logging.DEBUG)  # nosec B101


def test_normalized_log_event_emits_required_keys(log_capture):
    logger = get_logger("tests.logging")
    ctx = LogContext(provider="gemini", model="m", operation="stream")
    normalized_log_event(
        logger,
        "stream.adapter.error",
        ctx,
        phase="finalize",
        attempt=None,
        error_code="timeout",
        emitted=3,
        tokens={"prompt": 10, "completion": 5},
        latency_ms=12.3,
    )
    payload = events_named(log_capture, "stream.adapter.error")[-1]
    for key in REQUIRED_NORMALIZED_KEYS:
        assert key in payload  # nosec B101
    assert payload["provider"] == "gemini" and payload["operation"] == "stream"  # nosec B101
    assert payload["latency_ms"] == 12.3  # nosec B101


def test_extra_fields_do_not_override_normalized_values(log_capture):
    logger = get_logger("tests.logging")
    normalized_log_event(logger, "x.end", None, phase="finalize", emitted=True, tokens=None, extra_none=None, emitted_count=2)
    payload = events_named(log_capture, "x.end")[-1]
    assert "error_code" not in payload  # nosec B101
    assert "extra_none" not in payload  # nosec B101
    assert payload["emitted"] is True and payload["emitted_count"] == 2  # nosec B101


def test_coerce_tokens_mapping_and_tuple_pairs(log_capture):
    logger = get_logger("tests.logging2")
    normalized_log_event(logger, "tokens.check", LogContext(provider="p"), phase="finalize", tokens=[("a", 1), ("b", 2)])
    payload = events_named(log_capture, "tokens.check")[-1]
    assert payload["tokens"] == {"a": 1, "b": 2}  # nosec B101


def test_log_event_respects_level(log_capture, monkeypatch):
    monkeypatch.setenv("GENAI_LOG_LEVEL", "WARNING")
    logger = get_logger("tests.level")
    log_event(logger, "quiet.debug", None, level=logging.DEBUG)
    log_event(logger, "loud.warning", None, level=logging.WARNING)
    assert not events_named(log_capture, "quiet.debug")  # nosec B101
    assert events_named(log_capture, "loud.warning")  # nosec B101


def test_configure_logger_file_handler(tmp_path, monkeypatch):
    monkeypatch.setenv("GENAI_LOG_LEVEL", "INFO")
    path = tmp_path / "logs" / "genai.log"
    logger = configure_logger(level="INFO", file_path=str(path))
    try:
        log_event(get_logger("tests.file"), "file.event", None, value=1)
        for h in logger.handlers:
            h.flush()
        lines = path.read_text(encoding="utf-8").strip().splitlines()
        assert json.loads(lines[-1])["event"] == "file.event"  # nosec B101
    finally:
        configure_logger(file_path=None)


def test_json_formatter_hoists_event_keys_and_extras():
    formatter = JsonFormatter()
    record = logging.LogRecord("genai.x", logging.INFO, __file__, 1, json.dumps({"event": "e", "n": 1}), (), None)
    record.request_id = "r-1"
    out = json.loads(formatter.format(record))
    assert out["event"] == "e" and out["n"] == 1 and "msg" not in out  # nosec B101
    assert out["level"] == "INFO" and out["logger"] == "genai.x" and out["request_id"] == "r-1"  # nosec B101

    plain = logging.LogRecord("genai.x", logging.WARNING, __file__, 1, "hello %s", ("there",), None)
    assert json.loads(formatter.format(plain))["msg"] == "hello there"  # nosec B101
