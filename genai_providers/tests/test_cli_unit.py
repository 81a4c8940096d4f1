"""CLI parsing and subcommand behaviour with a mocked HTTP layer."""
from __future__ import annotations

import json

import httpx
import pytest

from genai_providers.cli import build_parser, main
from genai_providers.tests.gemini.mock_http import ScriptedHandler, build_provider, sse_response


def _text(text, finish=None):
    cand = {"content": {"parts": [{"text": text}]}}
    if finish:
        cand["finishReason"] = finish
    return {"candidates": [cand]}


def test_parser_subcommands():
    args = build_parser().parse_args(["stream", "--prompt", "hi", "--temperature", "0.5", "--max-output-tokens", "20"])
    assert args.cmd == "stream" and args.prompt == "hi"  # nosec B101
    assert args.temperature == 0.5 and args.max_output_tokens == 20  # nosec B101
    with pytest.raises(SystemExit):
        build_parser().parse_args(["generate"])


def test_no_command_prints_help(capsys):
    assert main([]) == 2  # nosec B101
    assert "genai-cli" in capsys.readouterr().out  # nosec B101


def test_stream_prints_deltas(settings, capsys):
    handler = ScriptedHandler(sse_response(_text("Hello, "), _text("world", finish="STOP")))
    code = main(["stream", "--prompt", "hi", "--temperature", "0.1"], provider=build_provider(settings, handler))
    assert code == 0  # nosec B101
    assert capsys.readouterr().out == "Hello, world\n"  # nosec B101
    assert handler.body()["generationConfig"] == {"temperature": 0.1}  # nosec B101


def test_stream_json_lines(settings, capsys):
    handler = ScriptedHandler(sse_response(_text("a"), _text("b", finish="STOP")))
    assert main(["stream", "--prompt", "hi", "--json"], provider=build_provider(settings, handler)) == 0  # nosec B101
    lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert [line["delta_text"] for line in lines] == ["a", "b"]  # nosec B101
    assert lines[-1]["is_final"] is True  # nosec B101


def test_stream_error_exit_code(settings, capsys):
    handler = ScriptedHandler(httpx.Response(400, text="bad"))
    assert main(["stream", "--prompt", "hi"], provider=build_provider(settings, handler)) == 1  # nosec B101
    assert "stream failed" in capsys.readouterr().err  # nosec B101


def test_generate_json(settings, capsys):
    handler = ScriptedHandler(httpx.Response(200, json=_text("done", finish="STOP")))
    assert main(["generate", "--prompt", "hi", "--json"], provider=build_provider(settings, handler)) == 0  # nosec B101
    data = json.loads(capsys.readouterr().out)
    assert data["text"] == "done" and data["finish_reason"] == "STOP"  # nosec B101


def test_models_and_tokens(settings, capsys):
    handler = ScriptedHandler(
        httpx.Response(200, json={"models": [{"name": "models/gemini-x", "displayName": "X"}]}),
        httpx.Response(200, json={"totalTokens": 3}),
    )
    provider = build_provider(settings, handler)
    assert main(["models"], provider=provider) == 0  # nosec B101
    assert capsys.readouterr().out == "gemini-x\tX\n"  # nosec B101
    assert main(["tokens", "--prompt", "abc", "--json"], provider=provider) == 0  # nosec B101
    assert json.loads(capsys.readouterr().out) == {"model": "gemini-2.0-flash", "total_tokens": 3}  # nosec B101


def test_missing_key_reports_error(capsys):
    assert main(["generate", "--prompt", "hi"]) == 1  # nosec B101
    assert "GEMINI_API_KEY" in capsys.readouterr().err  # nosec B101


def test_provider_error_as_json(settings, capsys):
    handler = ScriptedHandler(httpx.Response(404, text="nope"))
    assert main(["generate", "--prompt", "hi", "--json"], provider=build_provider(settings, handler)) == 1  # nosec B101
    err = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert err["code"] == "not_found" and err["status_code"] == 404  # nosec B101
