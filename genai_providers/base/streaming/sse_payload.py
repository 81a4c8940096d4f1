"""Decoding of a single ``data:`` payload from the streamGenerateContent body.

Each payload is a JSON object shaped like a non-streamed response::

    {"candidates": [{"content": {"parts": [...]}, "finishReason": "..."}],
     "usageMetadata": {...},
     "promptFeedback": {"blockReason": "..."}}

Only the first candidate is considered. Parts are normalized into a small set
of tagged variants so the assembler can dispatch on type instead of probing
dictionary keys.
"""
from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from ..errors import ArgumentDecodingError, MalformedChunkError
from ..models import DEFAULT_INLINE_MIME_TYPE, InlineImage

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"
UNSPECIFIED_FINISH_REASON = "FINISH_REASON_UNSPECIFIED"


@dataclass(frozen=True)
class TextPart:
    text: str


@dataclass(frozen=True)
class FunctionCallPart:
    name: str
    raw_args: Any


@dataclass(frozen=True)
class InlineDataPart:
    mime_type: str
    data: str


@dataclass(frozen=True)
class UnknownPart:
    raw: Any


Part = Union[TextPart, FunctionCallPart, InlineDataPart, UnknownPart]


@dataclass(frozen=True)
class SsePayload:
    """Normalized view of one streamed JSON payload."""

    parts: Tuple[Part, ...] = ()
    finish_reason: Optional[str] = None
    usage: Optional[Dict[str, Any]] = None
    block_reason: Optional[str] = None
    response_id: Optional[str] = None

    @property
    def terminal_reason(self) -> Optional[str]:
        """Finish reason that ends the stream, if any.

        An empty or unspecified finish reason is not terminal. A prompt
        blocked before any candidate was produced ends the stream with the
        block reason.
        """
        if self.finish_reason and self.finish_reason != UNSPECIFIED_FINISH_REASON:
            return self.finish_reason
        if self.block_reason:
            return self.block_reason
        return None


def _parse_part(raw: Any) -> Part:
    if not isinstance(raw, Mapping):
        return UnknownPart(raw)
    if "text" in raw and isinstance(raw["text"], str):
        return TextPart(raw["text"])
    call = raw.get("functionCall")
    if isinstance(call, Mapping):
        raw_args = call["args"] if "args" in call else call.get("arguments")
        return FunctionCallPart(name=str(call.get("name", "")), raw_args=raw_args)
    inline = raw.get("inlineData")
    if isinstance(inline, Mapping) and isinstance(inline.get("data"), str):
        return InlineDataPart(
            mime_type=inline.get("mimeType") or DEFAULT_INLINE_MIME_TYPE,
            data=inline["data"],
        )
    return UnknownPart(raw)


def decode_payload(payload: str) -> SsePayload:
    """Decode the text after ``data: `` into an :class:`SsePayload`.

    Raises:
        MalformedChunkError: payload is not a JSON object.
    """
    try:
        obj = json.loads(payload)
    except (json.JSONDecodeError, ValueError) as exc:
        raise MalformedChunkError(f"invalid JSON payload: {exc}") from exc
    if not isinstance(obj, Mapping):
        raise MalformedChunkError(f"expected JSON object, got {type(obj).__name__}")

    usage = obj.get("usageMetadata")
    usage = dict(usage) if isinstance(usage, Mapping) else None
    feedback = obj.get("promptFeedback")
    block_reason = feedback.get("blockReason") if isinstance(feedback, Mapping) else None
    response_id = obj.get("responseId")
    response_id = response_id if isinstance(response_id, str) and response_id else None

    candidates = obj.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], Mapping):
        return SsePayload(usage=usage, block_reason=block_reason or None, response_id=response_id)

    first = candidates[0]
    content = first.get("content")
    raw_parts = content.get("parts") if isinstance(content, Mapping) else None
    parts = tuple(_parse_part(p) for p in raw_parts) if isinstance(raw_parts, list) else ()
    finish = first.get("finishReason")
    return SsePayload(
        parts=parts,
        finish_reason=finish if isinstance(finish, str) else None,
        usage=usage,
        response_id=response_id,
    )


def decode_arguments(raw_args: Any) -> Dict[str, Any]:
    """Normalize ``functionCall.args`` into a mapping.

    The provider sends either a JSON object or a string holding JSON (under
    ``args`` or ``arguments``).

    Raises:
        ArgumentDecodingError: string args that are not a JSON object.
    """
    if raw_args is None:
        return {}
    if isinstance(raw_args, Mapping):
        return dict(raw_args)
    if isinstance(raw_args, str):
        if not raw_args.strip():
            return {}
        try:
            decoded = json.loads(raw_args)
        except (json.JSONDecodeError, ValueError) as exc:
            raise ArgumentDecodingError(f"function arguments are not valid JSON: {exc}") from exc
        if not isinstance(decoded, Mapping):
            raise ArgumentDecodingError("function arguments must decode to a JSON object")
        return dict(decoded)
    raise ArgumentDecodingError(f"unsupported function arguments type: {type(raw_args).__name__}")


def decode_inline(part: InlineDataPart) -> InlineImage:
    """Decode base64 inline data (raises ``MalformedChunkError`` on bad input)."""
    try:
        data = base64.b64decode(part.data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedChunkError(f"invalid base64 inline data: {exc}") from exc
    return InlineImage(data=data, mime_type=part.mime_type)


__all__ = [
    "DATA_PREFIX",
    "DONE_SENTINEL",
    "UNSPECIFIED_FINISH_REASON",
    "TextPart",
    "FunctionCallPart",
    "InlineDataPart",
    "UnknownPart",
    "Part",
    "SsePayload",
    "decode_payload",
    "decode_arguments",
    "decode_inline",
]
