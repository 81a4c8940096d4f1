"""Shared HTTP client pool.

Purpose:
    Provide a centralized, thread-safe pool of reusable ``httpx.Client``
    instances so repeated calls against the Generative Language API reuse
    connections. Timeouts derive exclusively from :func:`get_timeout_config`.

External dependencies:
    - ``httpx`` for the underlying HTTP clients.

Lifecycle & cleanup:
    - Sync clients are cached by ``(base_url, purpose)``. Purposes keep
      distinct pools (e.g., "gemini.request" vs "gemini.stream") because
      streaming clients use the longer idle read timeout.
    - Async clients are bound to the event loop that created them, so they are
      not pooled here; :func:`get_async_httpx_client` returns a fresh client
      the caller must close (``async with``).
    - All pooled clients are closed at interpreter exit via ``atexit``.
      Tests may call :func:`close_all_clients` explicitly.
"""

from __future__ import annotations

import atexit
import threading
from contextlib import suppress
from typing import Dict, Optional, Tuple

import httpx

from ..timeouts import get_timeout_config

_CLIENTS: Dict[Tuple[Optional[str], str], httpx.Client] = {}
_LOCK = threading.RLock()


def _is_streaming(purpose: str) -> bool:
    return purpose.endswith("stream")


def get_httpx_client(base_url: Optional[str], purpose: str) -> httpx.Client:
    """Return a pooled ``httpx.Client`` for the given base URL and purpose.

    Parameters:
        base_url: Optional API base URL set on the client so callers can use
            relative paths. ``None`` groups clients under a shared key.
        purpose: Short string discriminating separate pools. Purposes ending
            in ``"stream"`` get the streaming idle read timeout.

    Thread-safety:
        Safe for concurrent use; per-key creation is guarded by a re-entrant lock.
    """
    key = (base_url, purpose)
    client = _CLIENTS.get(key)
    if client is not None and not client.is_closed:
        return client

    with _LOCK:
        client = _CLIENTS.get(key)
        if client is not None and not client.is_closed:
            return client
        timeout = get_timeout_config().for_httpx(streaming=_is_streaming(purpose))
        client = httpx.Client(base_url=base_url, timeout=timeout) if base_url else httpx.Client(timeout=timeout)
        _CLIENTS[key] = client
        return client


def get_async_httpx_client(base_url: Optional[str], purpose: str) -> httpx.AsyncClient:
    """Return a new ``httpx.AsyncClient`` configured like the pooled sync clients."""
    timeout = get_timeout_config().for_httpx(streaming=_is_streaming(purpose))
    if base_url:
        return httpx.AsyncClient(base_url=base_url, timeout=timeout)
    return httpx.AsyncClient(timeout=timeout)


def close_all_clients() -> None:
    """Close and clear all pooled HTTP clients."""
    with _LOCK:
        clients = list(_CLIENTS.values())
        _CLIENTS.clear()
    for client in clients:
        with suppress(Exception):
            client.close()


atexit.register(close_all_clients)

__all__ = ["get_httpx_client", "get_async_httpx_client", "close_all_clients"]
