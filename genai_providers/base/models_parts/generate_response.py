"""
GenerateResponse DTO for non-streaming generation.

Holds the parsed ``generateContent`` answer: the raw candidate list for
callers that need it, plus the fields most callers read (text, images,
function calls, finish reason, usage).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..dto.function_call import FunctionCallFragment
from .inline_image import InlineImage


@dataclass
class GenerateResponse:
    """Normalized result of a ``generateContent`` call.

    Attributes:
        candidates: Candidate objects exactly as returned by the API.
        safety_ratings: Top-level ``safetyRatings`` (or prompt feedback ratings).
        text: Non-blank text parts of the first candidate, concatenated.
        images: Decoded ``inlineData`` parts of the first candidate.
        function_calls: ``functionCall`` parts of the first candidate.
        finish_reason: First candidate's ``finishReason`` when present.
        usage_metadata: ``usageMetadata`` mapping (empty when absent).
        response_status: HTTP status code of the response.
    """

    candidates: List[Dict[str, Any]]
    text: str
    response_status: int
    safety_ratings: Any = field(default_factory=dict)
    images: List[InlineImage] = field(default_factory=list)
    function_calls: List[FunctionCallFragment] = field(default_factory=list)
    finish_reason: Optional[str] = None
    usage_metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class EmbeddingResult:
    """Embedding values for one prompt (``values`` is a vector) or a batch (list of vectors)."""

    values: List[Any]
    response_status: int


__all__ = ["GenerateResponse", "EmbeddingResult"]
