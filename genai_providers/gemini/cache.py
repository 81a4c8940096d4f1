"""Context caching (``cachedContents``) operations.

Each function takes a :class:`TransportClient` and returns the decoded JSON
resource, except ``delete_cached_content`` which returns the HTTP status.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence, Union

from ..config.defaults import GEMINI_DEFAULT_CACHE_TTL
from .helpers import model_path
from .transport import TransportClient

CACHE_ENDPOINT = "cachedContents"

CacheContent = Union[str, Sequence[Mapping[str, Any]], Mapping[str, Any]]


def _cache_contents(content: CacheContent) -> List[Dict[str, Any]]:
    if isinstance(content, str):
        return [{"parts": [{"text": content}], "role": "user"}]
    if isinstance(content, Mapping):
        return [dict(content)]
    return [dict(c) for c in content]


def build_cache_body(model: str, content: CacheContent, *, ttl: str = GEMINI_DEFAULT_CACHE_TTL, system_instruction: str = "") -> Dict[str, Any]:
    body: Dict[str, Any] = {"model": model_path(model), "contents": _cache_contents(content), "ttl": ttl}
    if system_instruction:
        body["systemInstruction"] = {"parts": [{"text": system_instruction}]}
    return body


def create_cached_content(
    transport: TransportClient,
    model: str,
    content: CacheContent,
    *,
    ttl: str = GEMINI_DEFAULT_CACHE_TTL,
    system_instruction: str = "",
) -> Dict[str, Any]:
    """Create a cached content resource; the result's ``name`` is used as ``cached_content``."""
    body = build_cache_body(model, content, ttl=ttl, system_instruction=system_instruction)
    return transport.request("POST", CACHE_ENDPOINT, body, model=model).json()


def list_cached_content(transport: TransportClient) -> List[Dict[str, Any]]:
    """Metadata of every cached content (not the cached content itself)."""
    return transport.request("GET", CACHE_ENDPOINT).json().get("cachedContents", [])


def get_cached_content(transport: TransportClient, name: str) -> Dict[str, Any]:
    return transport.request("GET", name).json()


def update_cached_content(transport: TransportClient, name: str, ttl: str) -> Dict[str, Any]:
    """Change the TTL of a cached content; other fields cannot be updated."""
    return transport.request("PATCH", name, {"ttl": ttl}).json()


def delete_cached_content(transport: TransportClient, name: str) -> int:
    return transport.request("DELETE", name).status_code


__all__ = [
    "CACHE_ENDPOINT",
    "build_cache_body",
    "create_cached_content",
    "list_cached_content",
    "get_cached_content",
    "update_cached_content",
    "delete_cached_content",
]
