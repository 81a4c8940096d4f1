"""Result dataclasses, one class per module, re-exported by ``base.models``."""

from .generate_response import EmbeddingResult, GenerateResponse
from .inline_image import DEFAULT_INLINE_MIME_TYPE, InlineImage
from .model_info import ModelInfo

__all__ = [
    "EmbeddingResult",
    "GenerateResponse",
    "InlineImage",
    "DEFAULT_INLINE_MIME_TYPE",
    "ModelInfo",
]
