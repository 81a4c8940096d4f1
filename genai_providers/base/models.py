"""
Result models public surface.

Re-exports the one-class-per-file implementations under
``genai_providers.base.models_parts`` to keep imports stable.
"""

from .models_parts.generate_response import EmbeddingResult, GenerateResponse
from .models_parts.inline_image import DEFAULT_INLINE_MIME_TYPE, InlineImage
from .models_parts.model_info import ModelInfo

__all__ = [
    "EmbeddingResult",
    "GenerateResponse",
    "InlineImage",
    "DEFAULT_INLINE_MIME_TYPE",
    "ModelInfo",
]
