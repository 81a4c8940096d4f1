"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `genai_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode, RETRYABLE_CODES
from .provider_error import ProviderError
from .transport_error import TransportError
from .blocked_prompt_error import BlockedPromptError
from .configuration_error import ConfigurationError
from .stream_errors import ArgumentDecodingError, MalformedChunkError
from .classification import classify_exception, rpc_status_to_code, status_to_code, to_transport_error

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
