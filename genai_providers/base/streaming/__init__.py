"""Streaming package.

Exposes the stream assembler, its event type, line framing, metrics and the
cancellable controller under a single namespace.
"""

from .chunk_buffer import ChunkBuffer
from .sse_payload import (
    FunctionCallPart,
    InlineDataPart,
    SsePayload,
    TextPart,
    UnknownPart,
    decode_arguments,
    decode_payload,
)
from .stream_assembler import DEFAULT_FINISH_REASON, StreamAssembler
from .stream_controller import StreamController
from .stream_event import StreamEvent
from .streaming_finalize import finalize_stream
from .streaming_metrics import (
    StreamMetrics,
    apply_token_usage,
    apply_usage_metadata,
    build_token_usage,
    validate_token_usage,
)

__all__ = [
    "ChunkBuffer",
    "SsePayload",
    "TextPart",
    "FunctionCallPart",
    "InlineDataPart",
    "UnknownPart",
    "decode_payload",
    "decode_arguments",
    "StreamAssembler",
    "DEFAULT_FINISH_REASON",
    "StreamController",
    "StreamEvent",
    "finalize_stream",
    "StreamMetrics",
    "apply_token_usage",
    "apply_usage_metadata",
    "build_token_usage",
    "validate_token_usage",
]
