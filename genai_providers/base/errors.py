"""Unified error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``genai_providers.base.errors_parts`` to keep a single stable import path.
"""

from .errors_parts import (
    RETRYABLE_CODES,
    ArgumentDecodingError,
    BlockedPromptError,
    ConfigurationError,
    ErrorCode,
    MalformedChunkError,
    ProviderError,
    TransportError,
    classify_exception,
    rpc_status_to_code,
    status_to_code,
    to_transport_error,
)

__all__ = [
    "ErrorCode",
    "RETRYABLE_CODES",
    "ProviderError",
    "TransportError",
    "BlockedPromptError",
    "ConfigurationError",
    "ArgumentDecodingError",
    "MalformedChunkError",
    "classify_exception",
    "status_to_code",
    "rpc_status_to_code",
    "to_transport_error",
]
