"""
Base package

Provider-agnostic building blocks shared by the Gemini provider:

- DTOs and result models: serialization-friendly request/response objects
- Errors: normalized error taxonomy and exception classification
- Streaming: SSE line framing, stream assembly, cancellable controller
- Infrastructure: structured logging, timeouts, retry, pooled HTTP clients
"""

from .cancellation import CancellationToken, CancelledError
from .models import EmbeddingResult, GenerateResponse, InlineImage, ModelInfo
from .streaming import (
    ChunkBuffer,
    StreamAssembler,
    StreamController,
    StreamEvent,
    StreamMetrics,
    finalize_stream,
)
from .timeouts import TimeoutConfig, get_timeout_config

__all__ = [
    # Models
    "GenerateResponse",
    "EmbeddingResult",
    "InlineImage",
    "ModelInfo",
    # Timeouts & Cancellation
    "TimeoutConfig",
    "get_timeout_config",
    "CancellationToken",
    "CancelledError",
    # Streaming
    "ChunkBuffer",
    "StreamAssembler",
    "StreamController",
    "StreamEvent",
    "StreamMetrics",
    "finalize_stream",
]
