"""
Internal, non-fatal stream decoding errors.

Both exceptions are raised and caught inside the streaming package only. A
``MalformedChunkError`` makes the assembler skip one SSE line; an
``ArgumentDecodingError`` drops one function-call fragment. Neither ends the
stream nor reaches the consumer.
"""
from __future__ import annotations


class MalformedChunkError(ValueError):
    """An SSE ``data:`` payload is not a JSON object of the expected shape."""


class ArgumentDecodingError(ValueError):
    """A function call's arguments are neither a mapping nor a JSON object string."""


__all__ = ["MalformedChunkError", "ArgumentDecodingError"]
