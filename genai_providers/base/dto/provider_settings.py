"""Typed connection settings for the Gemini provider.

Captures the values needed to reach the API (key, base URL, API version,
default model, static headers) after the layered configuration merge. The
provider facade and the transport receive this object instead of long
argument lists.
"""
from __future__ import annotations

from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProviderSettings(BaseModel):
    """Resolved provider connection settings.

    Attributes
    ----------
    api_key:
        API key sent in the ``x-goog-api-key`` header. ``None`` defers the
        failure to the first call (raised as a ``ConfigurationError``).
    base_url:
        API root, e.g. ``https://generativelanguage.googleapis.com``.
    api_version:
        Path segment inserted after the base URL (``v1beta``).
    model:
        Default model for calls that do not name one.
    headers:
        Static headers added to every request.
    """

    model_config = ConfigDict(frozen=True)

    api_key: Optional[str] = None
    base_url: str
    api_version: str
    model: str
    headers: Mapping[str, str] = Field(default_factory=dict)

    def versioned_url(self, endpoint: str) -> str:
        """Return ``{base_url}/{api_version}/{endpoint}``."""
        return f"{self.base_url.rstrip('/')}/{self.api_version}/{endpoint.lstrip('/')}"

    def upload_url(self, endpoint: str) -> str:
        """Return ``{base_url}/upload/{api_version}/{endpoint}`` (resumable uploads)."""
        return f"{self.base_url.rstrip('/')}/upload/{self.api_version}/{endpoint.lstrip('/')}"


__all__ = ["ProviderSettings"]
