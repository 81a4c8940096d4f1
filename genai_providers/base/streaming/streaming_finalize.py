"""Terminal event construction.

Every stream ends through :func:`finalize_stream`, which builds the single
``is_final`` event and emits the consolidated ``stream.adapter.end`` (or
``stream.adapter.error``) log record.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

from ..dto.function_call import FunctionCallFragment
from ..errors import TransportError
from ..logging import LogContext, normalized_log_event
from ..models import InlineImage
from .stream_event import StreamEvent
from .streaming_metrics import StreamMetrics


def finalize_stream(
    *,
    logger: logging.Logger,
    ctx: LogContext,
    metrics: StreamMetrics,
    full_text: str,
    function_calls: Sequence[FunctionCallFragment] = (),
    delta_text: str = "",
    finish_reason: Optional[str] = None,
    error: Optional[TransportError] = None,
    usage: Optional[Dict[str, Any]] = None,
    images: Sequence[InlineImage] = (),
) -> StreamEvent:
    """Create the terminal :class:`StreamEvent` and log the stream outcome."""
    normalized_log_event(
        logger,
        "stream.adapter.end" if error is None else "stream.adapter.error",
        ctx,
        phase="finalize",
        attempt=None,
        emitted=metrics.emitted > 0,
        tokens=metrics.tokens,
        error_code=error.code.value if error is not None else None,
        level=logging.INFO if error is None else logging.WARNING,
        emitted_count=metrics.emitted,
        time_to_first_token_ms=metrics.time_to_first_token_ms,
        total_duration_ms=metrics.total_duration_ms,
        finish_reason=finish_reason,
        function_calls=len(function_calls) or None,
        error=str(error) if error is not None else None,
    )
    return StreamEvent(
        delta_text=delta_text,
        full_text=full_text,
        function_call_fragments=tuple(function_calls),
        finish_reason=finish_reason,
        is_final=True,
        error=error,
        usage=usage,
        images=tuple(images),
    )


__all__ = ["finalize_stream"]
