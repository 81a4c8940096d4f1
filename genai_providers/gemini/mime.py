"""File extension to media type lookup for uploads."""

from __future__ import annotations

import os

from ..base.errors import ConfigurationError, ErrorCode

MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".pdf": "application/pdf",
    ".txt": "text/plain",
    ".html": "text/html",
    ".csv": "text/csv",
    ".m4a": "audio/m4a",
    ".wav": "audio/wav",
    ".mp4": "video/mp4",
}


def get_mime_type(path: str) -> str:
    """Return the media type for ``path`` based on its extension (case-insensitive).

    Raises:
        ConfigurationError: the extension is not in ``MIME_TYPES``.
    """
    ext = os.path.splitext(path)[1].lower()
    try:
        return MIME_TYPES[ext]
    except KeyError:
        raise ConfigurationError(
            code=ErrorCode.VALIDATION,
            message=f"Unknown mime type for file {path} ({ext or 'no extension'}). Please specify `mime_type`.",
        ) from None


__all__ = ["MIME_TYPES", "get_mime_type"]
