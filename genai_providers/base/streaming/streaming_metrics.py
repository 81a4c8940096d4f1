"""Per-stream counters and token usage.

Token counts come from the ``usageMetadata`` object Gemini attaches to (at
least) the last chunk of a stream:

============================  ==================
``usageMetadata`` field       ``StreamMetrics``
============================  ==================
``promptTokenCount``          ``prompt_tokens``
``candidatesTokenCount``      ``completion_tokens``
``totalTokenCount``           ``total_tokens``
``thoughtsTokenCount``        ``thoughts_tokens``
``cachedContentTokenCount``   ``cached_tokens``
============================  ==================
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple


@dataclass
class StreamMetrics:
    """Counters for one streamed call.

    ``tokens`` stays ``None`` until usage is known; it then holds
    ``prompt``, ``completion`` and ``total`` plus ``thoughts`` and ``cached``
    when the server reported them.
    """

    emitted: int = 0
    time_to_first_token_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None
    thoughts_tokens: Optional[int] = None
    cached_tokens: Optional[int] = None
    tokens: Optional[Dict[str, Any]] = None


def build_token_usage(prompt: Optional[int], completion: Optional[int], total: Optional[int] = None) -> Dict[str, Optional[int]]:
    """``{"prompt", "completion", "total"}``; a missing total is derived when both parts are known."""
    if total is None and prompt is not None and completion is not None:
        total = prompt + completion
    return {"prompt": prompt, "completion": completion, "total": total}


def apply_token_usage(
    metrics: StreamMetrics,
    *,
    prompt: Optional[int],
    completion: Optional[int],
    total: Optional[int] = None,
    thoughts: Optional[int] = None,
    cached: Optional[int] = None,
) -> None:
    usage: Dict[str, Any] = build_token_usage(prompt, completion, total)
    metrics.prompt_tokens = usage["prompt"]
    metrics.completion_tokens = usage["completion"]
    metrics.total_tokens = usage["total"]
    metrics.thoughts_tokens = thoughts
    metrics.cached_tokens = cached
    if thoughts is not None:
        usage["thoughts"] = thoughts
    if cached is not None:
        usage["cached"] = cached
    metrics.tokens = usage


def _count(usage: Mapping[str, Any], key: str) -> Optional[int]:
    value = usage.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def apply_usage_metadata(metrics: StreamMetrics, usage: Optional[Mapping[str, Any]]) -> None:
    """Copy a ``usageMetadata`` mapping onto ``metrics`` (no-op when empty)."""
    if not usage:
        return
    apply_token_usage(
        metrics,
        prompt=_count(usage, "promptTokenCount"),
        completion=_count(usage, "candidatesTokenCount"),
        total=_count(usage, "totalTokenCount"),
        thoughts=_count(usage, "thoughtsTokenCount"),
        cached=_count(usage, "cachedContentTokenCount"),
    )


def validate_token_usage(
    metrics: StreamMetrics,
    *,
    raise_on_error: bool = False,
) -> Tuple[bool, Optional[str]]:
    """Check counts for consistency; return ``(ok, reason)``.

    ``totalTokenCount`` may exceed ``prompt + completion`` (thinking tokens),
    so only negative counts and a total below that sum are rejected.

    Raises:
        ValueError: the counts are inconsistent and ``raise_on_error`` is set.
    """
    reason: Optional[str] = None
    counts = {
        "prompt_tokens": metrics.prompt_tokens,
        "completion_tokens": metrics.completion_tokens,
        "total_tokens": metrics.total_tokens,
        "thoughts_tokens": metrics.thoughts_tokens,
        "cached_tokens": metrics.cached_tokens,
    }
    negative = next(((n, v) for n, v in counts.items() if v is not None and v < 0), None)
    if negative is not None:
        reason = f"{negative[0]} negative: {negative[1]}"
    elif None not in (metrics.prompt_tokens, metrics.completion_tokens, metrics.total_tokens) and (
        metrics.prompt_tokens + metrics.completion_tokens > metrics.total_tokens
    ):
        reason = "total_tokens smaller than prompt+completion"

    if reason is not None and raise_on_error:
        raise ValueError(f"token usage invalid: {reason}")
    return reason is None, reason


__all__ = [
    "StreamMetrics",
    "apply_token_usage",
    "apply_usage_metadata",
    "build_token_usage",
    "validate_token_usage",
]
