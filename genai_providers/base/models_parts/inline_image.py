"""
Decoded inline media returned by the model.

``inlineData`` parts carry base64 payloads; both the response parser and the
stream assembler decode them into ``InlineImage`` so callers get raw bytes.
"""
from __future__ import annotations

from dataclasses import dataclass

DEFAULT_INLINE_MIME_TYPE = "image/png"


@dataclass(frozen=True)
class InlineImage:
    """Inline binary content from an ``inlineData`` part.

    Attributes:
        data: Decoded bytes.
        mime_type: Declared media type (``image/png`` when the part omits it).
    """

    data: bytes
    mime_type: str = DEFAULT_INLINE_MIME_TYPE


__all__ = ["InlineImage", "DEFAULT_INLINE_MIME_TYPE"]
