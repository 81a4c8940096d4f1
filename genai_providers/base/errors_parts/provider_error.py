"""
Base exception for every failure this package raises on purpose.

HTTP errors, blocked prompts and bad configuration all carry a normalized
:class:`ErrorCode`, which is what retry decisions and log records key on.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .error_code import ErrorCode


@dataclass
class ProviderError(Exception):
    """Failure with a normalized code.

    Attributes:
        code: Normalized classification.
        message: Human-readable description.
        provider: Origin (``"gemini"``).
        model: Model involved, when known.
        retryable: Whether the code is one the retry policy would retry.
        raw: Underlying exception, kept for diagnostics.
    """

    code: ErrorCode
    message: str
    provider: str = "gemini"
    model: Optional[str] = None
    retryable: bool = False
    raw: Optional[BaseException] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly summary (``raw`` is left out)."""
        out: Dict[str, Any] = {"error": self.message, "code": self.code.value, "provider": self.provider}
        if self.model:
            out["model"] = self.model
        status = getattr(self, "status_code", None)
        if status is not None:
            out["status_code"] = status
        return out

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"


__all__ = ["ProviderError"]
