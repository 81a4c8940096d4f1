"""genai_providers package

Streaming-first client for the Gemini Generative Language API.

Public API (re-exported):
    - Version: ``__version__``
    - Provider: :class:`GeminiProvider`
    - Streaming: :class:`StreamEvent`, :class:`StreamAssembler`,
      :class:`StreamController`, :class:`CancellationToken`
    - Configuration DTOs: :class:`GenerateContentConfig`, :class:`SafetySetting`
    - Errors: :class:`ProviderError`, :class:`TransportError`,
      :class:`BlockedPromptError`, :class:`ConfigurationError`, :class:`ErrorCode`
"""

from .base.cancellation import CancellationToken
from .base.dto import FunctionCallFragment, GenerateContentConfig, HttpOptions, SafetySetting
from .base.errors import (
    BlockedPromptError,
    ConfigurationError,
    ErrorCode,
    ProviderError,
    TransportError,
)
from .base.models import EmbeddingResult, GenerateResponse, InlineImage, ModelInfo
from .base.streaming import StreamAssembler, StreamController, StreamEvent
from .gemini import (
    GeminiProvider,
    build_function_conversation,
    execute_function_calls,
    function_declaration,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "GeminiProvider",
    "StreamEvent",
    "StreamAssembler",
    "StreamController",
    "CancellationToken",
    "GenerateContentConfig",
    "HttpOptions",
    "SafetySetting",
    "FunctionCallFragment",
    "GenerateResponse",
    "EmbeddingResult",
    "InlineImage",
    "ModelInfo",
    "ProviderError",
    "TransportError",
    "BlockedPromptError",
    "ConfigurationError",
    "ErrorCode",
    "function_declaration",
    "build_function_conversation",
    "execute_function_calls",
]
