"""Blocked prompt error raised by non-streaming generation."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .provider_error import ProviderError


@dataclass
class BlockedPromptError(ProviderError):
    """The API refused the prompt (``promptFeedback.blockReason``) and returned no candidates."""

    block_reason: Optional[str] = None


__all__ = ["BlockedPromptError"]
