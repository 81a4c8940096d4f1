"""Function calling helpers.

Build tool declarations, run the calls a model requested against local Python
callables, and assemble the follow-up conversation carrying the results.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from ..base.dto.function_call import FunctionCallFragment
from ..base.logging import get_logger, log_event

_logger = get_logger("gemini.functions")

_PARAMETER_KEYS = ("description", "properties", "items", "required", "enum")


def function_declaration(name: str, description: Optional[str], parameters: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a ``functionDeclarations`` entry; the parameter ``type`` defaults to ``object``."""
    params: Dict[str, Any] = {"type": parameters.get("type", "object")}
    for key in _PARAMETER_KEYS:
        if parameters.get(key) is not None:
            params[key] = parameters[key]
    decl: Dict[str, Any] = {"name": name, "parameters": params}
    if description is not None:
        decl["description"] = description
    return decl


def function_tools(*declarations: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Wrap declarations into the ``tools`` list of a generate request."""
    return [{"functionDeclarations": list(declarations)}]


def build_function_conversation(
    user_query: str,
    function_name: str,
    function_args: Mapping[str, Any],
    function_result: Mapping[str, Any],
) -> List[Dict[str, Any]]:
    """Conversation for the final answer: user query, model call, function response."""
    return [
        {"role": "user", "parts": [{"text": user_query}]},
        {"role": "model", "parts": [{"functionCall": {"name": function_name, "args": dict(function_args)}}]},
        {
            "role": "function",
            "parts": [{"functionResponse": {"name": function_name, "response": dict(function_result)}}],
        },
    ]


def _call_args(call: Union[FunctionCallFragment, Mapping[str, Any]]) -> tuple[str, Dict[str, Any]]:
    if isinstance(call, FunctionCallFragment):
        return call.name, dict(call.arguments)
    args = call.get("args", call.get("arguments")) or {}
    return str(call.get("name", "")), dict(args)


def execute_function_calls(
    calls: Iterable[Union[FunctionCallFragment, Mapping[str, Any]]],
    functions: Mapping[str, Callable[..., Any]],
) -> Dict[str, Any]:
    """Run each requested call with keyword arguments and collect results by name.

    Result shapes:
      * unknown function -> ``{"error": "Function X not found"}``
      * raised exception -> ``{"error": "Error executing function: ..."}``
      * ``None`` -> ``{"status": "completed"}``
      * a dict -> unchanged
      * anything else -> ``{"value": result}``
    """
    results: Dict[str, Any] = {}
    for call in calls:
        name, args = _call_args(call)
        func = functions.get(name)
        if func is None:
            results[name] = {"error": f"Function {name} not found"}
            continue
        try:
            result = func(**args)
        except Exception as exc:  # surfaced to the model as a function result
            log_event(_logger, "function.error", None, level=logging.WARNING, function=name, error=str(exc))
            results[name] = {"error": f"Error executing function: {exc}"}
            continue
        if isinstance(result, dict):
            results[name] = result
        elif result is None:
            results[name] = {"status": "completed"}
        else:
            results[name] = {"value": result}
    return results


__all__ = [
    "function_declaration",
    "function_tools",
    "build_function_conversation",
    "execute_function_calls",
]
