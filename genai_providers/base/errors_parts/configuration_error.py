"""Configuration error for invalid client-side inputs (missing key, bad settings)."""
from __future__ import annotations

from dataclasses import dataclass

from .provider_error import ProviderError


@dataclass
class ConfigurationError(ProviderError):
    """Raised before any network call when the request cannot be built."""


__all__ = ["ConfigurationError"]
