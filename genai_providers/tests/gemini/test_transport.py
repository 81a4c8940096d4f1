"""HTTP transport behaviour over ``httpx.MockTransport``.

Covers:
- URL, query, header and body of streaming and plain requests
- non-2xx statuses mapped to ``TransportError`` with the response body
- ``error.status`` in the body overriding the HTTP status, and Retry-After
- retry of retryable codes when opening a stream, no retry otherwise
- mid-body read failures surfacing from the byte stream
- the async stream twin
"""

from __future__ import annotations

import asyncio
import time

import httpx
import pytest

from genai_providers.base.errors import ConfigurationError, ErrorCode, TransportError
from genai_providers.gemini import TransportClient, TransportRequest
from genai_providers.gemini.transport import API_KEY_HEADER
from genai_providers.tests.gemini.mock_http import ScriptedHandler, sse_response
from genai_providers.tests.utils import events_named

_ENDPOINT = "models/gemini-2.0-flash:streamGenerateContent"


def _transport(settings, handler):
    return TransportClient(
        settings,
        client=httpx.Client(transport=httpx.MockTransport(handler)),
        async_client_factory=lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


@pytest.fixture()
def no_sleep(monkeypatch):
    sleeps = []
    monkeypatch.setattr(time, "sleep", sleeps.append)
    return sleeps


def test_open_stream_request_shape(settings):
    handler = ScriptedHandler(sse_response({"candidates": []}))
    transport = _transport(settings, handler)
    req = TransportRequest(endpoint=_ENDPOINT, body={"contents": []}, headers={"X-Trace": "1"}, model="gemini-2.0-flash")
    with transport.open_stream(req) as stream:
        data = b"".join(stream)
    sent = handler.last
    assert sent.method == "POST"  # nosec B101
    assert sent.url.path == f"/v1beta/{_ENDPOINT}"  # nosec B101
    assert sent.url.params["alt"] == "sse"  # nosec B101
    assert sent.headers[API_KEY_HEADER] == "k-unit-123"  # nosec B101
    assert sent.headers["Content-Type"] == "application/json"  # nosec B101
    assert sent.headers["X-Trace"] == "1"  # nosec B101
    assert handler.body() == {"contents": []}  # nosec B101
    assert data.startswith(b"data: ")  # nosec B101


def test_open_stream_timeout_override(settings):
    handler = ScriptedHandler(sse_response())
    transport = _transport(settings, handler)
    with transport.open_stream(TransportRequest(endpoint=_ENDPOINT, timeout_seconds=4.5)):
        pass
    assert handler.last.extensions["timeout"]["read"] == 4.5  # nosec B101


def test_non_2xx_raises_with_body(settings, no_sleep):
    handler = ScriptedHandler(httpx.Response(400, text='{"error": {"message": "bad request field"}}'))
    transport = _transport(settings, handler)
    with pytest.raises(TransportError) as ei:
        transport.open_stream(TransportRequest(endpoint=_ENDPOINT))
    err = ei.value
    assert err.status_code == 400 and err.code is ErrorCode.VALIDATION  # nosec B101
    assert "bad request field" in err.message and "bad request field" in err.body  # nosec B101
    assert len(handler.requests) == 1 and no_sleep == []  # nosec B101


def test_rpc_status_in_error_body_wins(settings, no_sleep):
    body = '{"error": {"code": 499, "message": "client went away", "status": "CANCELLED"}}'
    handler = ScriptedHandler(httpx.Response(499, text=body))
    with pytest.raises(TransportError) as ei:
        _transport(settings, handler).open_stream(TransportRequest(endpoint=_ENDPOINT))
    assert ei.value.code is ErrorCode.CANCELLED and not ei.value.retryable  # nosec B101


def test_rate_limit_is_retried_when_opening(settings, no_sleep, log_capture):
    handler = ScriptedHandler(httpx.Response(429, text="slow down"), sse_response({"candidates": []}))
    transport = _transport(settings, handler)
    with transport.open_stream(TransportRequest(endpoint=_ENDPOINT)) as stream:
        list(stream)
    assert len(handler.requests) == 2  # nosec B101
    assert no_sleep == [1.0]  # nosec B101
    attempts = events_named(log_capture, "retry.attempt")
    assert attempts and attempts[0]["error_code"] == "rate_limit"  # nosec B101


def test_retry_after_header_sets_the_delay(settings, no_sleep):
    handler = ScriptedHandler(
        httpx.Response(429, headers={"Retry-After": "3"}, text="slow down"),
        httpx.Response(503, headers={"Retry-After": "Wed, 21 Oct 2026 07:28:00 GMT"}, text="later"),
    )
    with pytest.raises(TransportError) as ei:
        _transport(settings, handler).open_stream(TransportRequest(endpoint=_ENDPOINT, max_attempts=2))
    assert no_sleep == [3.0]  # nosec B101
    assert ei.value.code is ErrorCode.UNAVAILABLE and ei.value.retry_after is None  # nosec B101


def test_server_error_is_not_retried(settings, no_sleep):
    handler = ScriptedHandler(httpx.Response(500, text="internal"))
    with pytest.raises(TransportError) as ei:
        _transport(settings, handler).open_stream(TransportRequest(endpoint=_ENDPOINT))
    assert ei.value.code is ErrorCode.SERVER_ERROR  # nosec B101
    assert len(handler.requests) == 1  # nosec B101


def test_connect_errors_exhaust_attempts(settings, no_sleep):
    handler = ScriptedHandler(*[httpx.ConnectError("refused") for _ in range(3)])
    with pytest.raises(TransportError) as ei:
        _transport(settings, handler).open_stream(TransportRequest(endpoint=_ENDPOINT))
    assert ei.value.code is ErrorCode.TRANSIENT  # nosec B101
    assert len(handler.requests) == 3  # nosec B101


def test_per_call_max_attempts(settings, no_sleep):
    handler = ScriptedHandler(httpx.ConnectError("refused"))
    with pytest.raises(TransportError):
        _transport(settings, handler).open_stream(TransportRequest(endpoint=_ENDPOINT, max_attempts=1))
    assert len(handler.requests) == 1  # nosec B101


def test_read_error_mid_body(settings):
    def body():
        yield b'data: {"candidates": []}\n'
        raise httpx.ReadError("connection reset")

    handler = ScriptedHandler(httpx.Response(200, content=body()))
    stream = _transport(settings, handler).open_stream(TransportRequest(endpoint=_ENDPOINT))
    received = []
    with pytest.raises(TransportError) as ei:
        for chunk in stream:
            received.append(chunk)
    stream.close()
    assert received == [b'data: {"candidates": []}\n']  # nosec B101
    assert ei.value.code is ErrorCode.TRANSIENT  # nosec B101


def test_missing_key_fails_before_sending(settings):
    handler = ScriptedHandler()
    transport = _transport(settings.model_copy(update={"api_key": None}), handler)
    with pytest.raises(ConfigurationError) as ei:
        transport.request("GET", "models")
    assert ei.value.code is ErrorCode.AUTH  # nosec B101
    assert handler.requests == []  # nosec B101


def test_plain_request_and_logging(settings, log_capture):
    handler = ScriptedHandler(httpx.Response(200, json={"models": []}))
    response = _transport(settings, handler).request("GET", "models", params={"pageSize": 5})
    assert response.json() == {"models": []}  # nosec B101
    sent = handler.last
    assert sent.url.params["pageSize"] == "5"  # nosec B101
    assert "Content-Type" not in sent.headers  # nosec B101
    assert events_named(log_capture, "request.start")  # nosec B101
    end = events_named(log_capture, "request.end")[-1]
    assert end["status_code"] == 200  # nosec B101


def test_plain_request_error_is_logged(settings, log_capture):
    handler = ScriptedHandler(httpx.Response(404, text="no such model"))
    with pytest.raises(TransportError):
        _transport(settings, handler).request("GET", "models/nope")
    err = events_named(log_capture, "request.error")[-1]
    assert err["error_code"] == "not_found" and err["status_code"] == 404  # nosec B101


def test_absolute_url_and_raw_content(settings):
    handler = ScriptedHandler(httpx.Response(200, json={"ok": True}))
    _transport(settings, handler).request("PUT", "files", url="https://upload.invalid/session/1", content=b"raw", upload=True)
    sent = handler.last
    assert str(sent.url) == "https://upload.invalid/session/1"  # nosec B101
    assert sent.content == b"raw"  # nosec B101


def test_async_open_stream(settings):
    handler = ScriptedHandler(sse_response({"candidates": []}, done=True))
    transport = _transport(settings, handler)

    async def run():
        stream = await transport.aopen_stream(TransportRequest(endpoint=_ENDPOINT))
        async with stream:
            return b"".join([c async for c in stream])

    data = asyncio.run(run())
    assert data.endswith(b"data: [DONE]\n\n")  # nosec B101
    assert handler.last.url.params["alt"] == "sse"  # nosec B101


def test_async_open_stream_status_error(settings):
    handler = ScriptedHandler(httpx.Response(403, text="denied"))
    transport = _transport(settings, handler)

    async def run():
        await transport.aopen_stream(TransportRequest(endpoint=_ENDPOINT))

    with pytest.raises(TransportError) as ei:
        asyncio.run(run())
    assert ei.value.code is ErrorCode.AUTH and ei.value.status_code == 403  # nosec B101
