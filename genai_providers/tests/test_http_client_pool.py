"""Unit tests for shared httpx client pool.

Covers:
- Same key (base_url, purpose) returns the same instance.
- Different purpose or base_url yields different instances.
- Streaming purposes get the idle stream read timeout.
- Closed clients are replaced.
"""
from __future__ import annotations

import httpx

from genai_providers.base.http import close_all_clients, get_async_httpx_client, get_httpx_client
from genai_providers.base.timeouts import get_timeout_config


def setup_function(_):
    close_all_clients()


def teardown_function(_):
    close_all_clients()


def test_same_key_returns_same_instance():
    c1 = get_httpx_client("https://api.example.com", purpose="gemini.request")
    c2 = get_httpx_client("https://api.example.com", purpose="gemini.request")
    assert c1 is c2, "Expected pooled client instances to be identical for same key"


def test_different_purpose_returns_different_instances():
    c1 = get_httpx_client("https://api.example.com", purpose="gemini.request")
    c2 = get_httpx_client("https://api.example.com", purpose="gemini.stream")
    assert c1 is not c2, "Different purposes should not share the same client instance"


def test_different_base_url_returns_different_instances():
    c1 = get_httpx_client("https://api.example.com", purpose="gemini.request")
    c2 = get_httpx_client("https://api.other.com", purpose="gemini.request")
    assert c1 is not c2, "Different base URLs should not share the same client instance"


def test_stream_purpose_uses_stream_timeout():
    cfg = get_timeout_config()
    stream = get_httpx_client(None, purpose="gemini.stream")
    plain = get_httpx_client(None, purpose="gemini.request")
    assert stream.timeout.read == cfg.stream_timeout_seconds  # nosec B101
    assert plain.timeout.read == cfg.http_timeout_seconds  # nosec B101
    assert stream.timeout.connect == cfg.connect_timeout_seconds  # nosec B101


def test_closed_client_is_replaced():
    c1 = get_httpx_client(None, purpose="gemini.request")
    c1.close()
    c2 = get_httpx_client(None, purpose="gemini.request")
    assert c2 is not c1 and not c2.is_closed  # nosec B101


def test_async_clients_are_not_pooled():
    a1 = get_async_httpx_client(None, "gemini.stream")
    a2 = get_async_httpx_client(None, "gemini.stream")
    assert isinstance(a1, httpx.AsyncClient) and a1 is not a2  # nosec B101
