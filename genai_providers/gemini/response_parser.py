"""Parsing of non-streamed ``generateContent`` responses.

``parse_generate_response`` turns the decoded JSON body into a
:class:`GenerateResponse`. Part decoding (function call arguments, inline
data) reuses the streaming payload helpers so both paths agree on the wire
shapes they accept.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping

from ..base.dto.function_call import FunctionCallFragment
from ..base.errors import ArgumentDecodingError, BlockedPromptError, ErrorCode, MalformedChunkError
from ..base.logging import get_logger, log_event
from ..base.models import EmbeddingResult, GenerateResponse, InlineImage
from ..base.streaming.sse_payload import (
    FunctionCallPart,
    InlineDataPart,
    TextPart,
    _parse_part,
    decode_arguments,
    decode_inline,
)
from .helpers import PROVIDER_NAME

_logger = get_logger("gemini.response")


def parse_generate_response(payload: Mapping[str, Any], status: int = 200, *, model: str | None = None) -> GenerateResponse:
    """Normalize a ``generateContent`` body.

    Raises:
        BlockedPromptError: the prompt was blocked and no candidate came back.
    """
    candidates = payload.get("candidates") or []
    if not isinstance(candidates, list):
        candidates = []
    feedback = payload.get("promptFeedback") or {}

    if not candidates and isinstance(feedback, Mapping) and feedback.get("blockReason"):
        reason = str(feedback["blockReason"])
        raise BlockedPromptError(
            code=ErrorCode.BLOCKED,
            message=f"prompt blocked: {reason}",
            provider=PROVIDER_NAME,
            model=model,
            block_reason=reason,
        )

    text_parts: List[str] = []
    images: List[InlineImage] = []
    calls: List[FunctionCallFragment] = []
    finish_reason = None

    if candidates:
        first = candidates[0] if isinstance(candidates[0], Mapping) else {}
        finish_reason = first.get("finishReason")
        content = first.get("content") or {}
        raw_parts = content.get("parts") if isinstance(content, Mapping) else None
        for raw in raw_parts or []:
            part = _parse_part(raw)
            if isinstance(part, TextPart):
                if part.text.strip():
                    text_parts.append(part.text)
            elif isinstance(part, InlineDataPart):
                if not part.data.strip():
                    continue
                try:
                    images.append(decode_inline(InlineDataPart(part.mime_type, part.data.strip())))
                except MalformedChunkError as exc:
                    log_event(_logger, "response.decode_error", None, level=logging.WARNING, model=model, error=str(exc))
            elif isinstance(part, FunctionCallPart):
                try:
                    calls.append(FunctionCallFragment(name=part.name, arguments=decode_arguments(part.raw_args)))
                except ArgumentDecodingError as exc:
                    log_event(_logger, "response.args_error", None, level=logging.WARNING, model=model, function=part.name, error=str(exc))
    else:
        text = payload.get("text")
        if isinstance(text, str) and text:
            text_parts.append(text)

    safety = payload.get("safetyRatings")
    if safety is None and isinstance(feedback, Mapping):
        safety = feedback.get("safetyRatings")

    usage = payload.get("usageMetadata")
    return GenerateResponse(
        candidates=list(candidates),
        text="".join(text_parts),
        response_status=status,
        safety_ratings=safety if safety is not None else {},
        images=images,
        function_calls=calls,
        finish_reason=finish_reason,
        usage_metadata=dict(usage) if isinstance(usage, Mapping) else {},
    )


def parse_embedding(payload: Mapping[str, Any], status: int = 200) -> EmbeddingResult:
    """Read ``embedding.values`` (single) or ``embeddings[].values`` (batch)."""
    if "embeddings" in payload:
        values: List[Any] = [e.get("values", []) for e in payload.get("embeddings") or []]
    else:
        embedding: Dict[str, Any] = payload.get("embedding") or {}
        values = list(embedding.get("values", []))
    return EmbeddingResult(values=values, response_status=status)


__all__ = ["parse_generate_response", "parse_embedding"]
