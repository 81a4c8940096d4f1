"""Gemini (Generative Language API) provider package."""

from .client import GeminiProvider
from .functions import build_function_conversation, execute_function_calls, function_declaration, function_tools
from .mime import get_mime_type
from .transport import ByteStream, TransportClient, TransportRequest

__all__ = [
    "GeminiProvider",
    "TransportClient",
    "TransportRequest",
    "ByteStream",
    "function_declaration",
    "function_tools",
    "build_function_conversation",
    "execute_function_calls",
    "get_mime_type",
]
