"""Function declaration helpers and local execution of requested calls."""

from __future__ import annotations

from genai_providers.base.dto import FunctionCallFragment
from genai_providers.gemini import (
    build_function_conversation,
    execute_function_calls,
    function_declaration,
    function_tools,
)
from genai_providers.tests.utils import events_named


def test_function_declaration_defaults_to_object():
    decl = function_declaration("get_weather", "Weather lookup", {"properties": {"location": {"type": "string"}}, "required": ["location"]})
    assert decl == {  # nosec B101
        "name": "get_weather",
        "description": "Weather lookup",
        "parameters": {"type": "object", "properties": {"location": {"type": "string"}}, "required": ["location"]},
    }
    assert function_tools(decl) == [{"functionDeclarations": [decl]}]  # nosec B101
    assert "description" not in function_declaration("f", None, {})  # nosec B101


def test_execute_function_calls_result_shapes(log_capture):
    def boom(**_):
        raise RuntimeError("kaput")

    functions = {
        "weather": lambda location: {"temp": 21, "location": location},
        "noop": lambda: None,
        "count": lambda n: n + 1,
        "boom": boom,
    }
    calls = [
        FunctionCallFragment(name="weather", arguments={"location": "Paris"}),
        FunctionCallFragment(name="noop"),
        {"name": "count", "args": {"n": 1}},
        {"name": "boom", "arguments": {}},
        {"name": "missing", "args": {}},
    ]
    results = execute_function_calls(calls, functions)
    assert results["weather"] == {"temp": 21, "location": "Paris"}  # nosec B101
    assert results["noop"] == {"status": "completed"}  # nosec B101
    assert results["count"] == {"value": 2}  # nosec B101
    assert results["boom"] == {"error": "Error executing function: kaput"}  # nosec B101
    assert results["missing"] == {"error": "Function missing not found"}  # nosec B101
    assert events_named(log_capture, "function.error")[0]["function"] == "boom"  # nosec B101


def test_build_function_conversation():
    convo = build_function_conversation("Weather in Paris?", "weather", {"location": "Paris"}, {"temp": 21})
    assert [t["role"] for t in convo] == ["user", "model", "function"]  # nosec B101
    assert convo[1]["parts"][0] == {"functionCall": {"name": "weather", "args": {"location": "Paris"}}}  # nosec B101
    assert convo[2]["parts"][0]["functionResponse"] == {"name": "weather", "response": {"temp": 21}}  # nosec B101
