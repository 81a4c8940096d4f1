"""HTTP transport for the Generative Language API.

Purpose:
- Own every network interaction: streaming POSTs whose body is consumed
  chunk by chunk, plain JSON requests, and the two-step resumable upload.
- Convert every failure (connect, timeout, read, non-2xx) into a
  :class:`TransportError` so callers deal with one error type.

External dependencies:
- ``httpx`` through the shared pool (``get_httpx_client``) for sync calls and
  a fresh ``httpx.AsyncClient`` per async stream.

Timeout & retry strategy:
- Timeouts come from ``get_timeout_config()``; ``HttpOptions.timeout_seconds``
  overrides the read timeout for one call.
- Plain requests and stream *opening* are retried with ``retry()`` for
  retryable codes. Bytes already delivered to the consumer are never replayed,
  so a failure mid-body ends the stream instead.
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import suppress
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Callable, Dict, Iterator, Mapping, Optional

import httpx

from ..base.errors import (
    RETRYABLE_CODES,
    ConfigurationError,
    ErrorCode,
    TransportError,
    rpc_status_to_code,
    status_to_code,
    to_transport_error,
)
from ..base.dto.provider_settings import ProviderSettings
from ..base.http import get_async_httpx_client, get_httpx_client
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.resilience.retry import async_retry, retry
from ..base.timeouts import get_timeout_config
from .helpers import PROVIDER_NAME, build_retry_config

API_KEY_HEADER = "x-goog-api-key"
_BODY_PREVIEW = 500


@dataclass(frozen=True)
class TransportRequest:
    """A single streaming call.

    Attributes:
        endpoint: Path below ``{base_url}/{api_version}``, e.g.
            ``models/gemini-2.0-flash:streamGenerateContent``.
        body: JSON body.
        params: Extra query parameters (``alt=sse`` is always added).
        headers: Extra headers for this call.
        timeout_seconds: Read timeout override.
        max_attempts: Retry override for opening the stream.
        model: Model name used for logs and error context.
    """

    endpoint: str
    body: Dict[str, Any] = field(default_factory=dict)
    params: Dict[str, str] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    timeout_seconds: Optional[float] = None
    max_attempts: Optional[int] = None
    model: Optional[str] = None


def _retry_after(response: httpx.Response) -> Optional[float]:
    """Seconds from a numeric ``Retry-After`` header (HTTP dates are ignored)."""
    value = response.headers.get("retry-after")
    if not value:
        return None
    try:
        seconds = float(value)
    except ValueError:
        return None
    return seconds if seconds >= 0 else None


def _rpc_status(body: str) -> Optional[str]:
    """``error.status`` of a JSON error body, if the body is one."""
    try:
        payload = json.loads(body)
    except ValueError:
        return None
    error = payload.get("error") if isinstance(payload, dict) else None
    status = error.get("status") if isinstance(error, dict) else None
    return status if isinstance(status, str) else None


def _status_error(response: httpx.Response, *, model: Optional[str], body: str) -> TransportError:
    code = rpc_status_to_code(_rpc_status(body)) or status_to_code(response.status_code)
    return TransportError(
        code=code,
        message=f"Request failed with status {response.status_code}: {body[:_BODY_PREVIEW]}",
        provider=PROVIDER_NAME,
        model=model,
        retryable=code in RETRYABLE_CODES,
        status_code=response.status_code,
        body=body,
        retry_after=_retry_after(response),
    )


class ByteStream:
    """Context-managed iterator over the non-empty body chunks of one response.

    Iteration errors are raised as :class:`TransportError`. ``close()`` is
    idempotent and releases the connection back to the pool.
    """

    def __init__(self, response: httpx.Response, closer: Callable[[], None], *, model: Optional[str] = None) -> None:
        self.response = response
        self._closer = closer
        self._model = model
        self._closed = False

    def __iter__(self) -> Iterator[bytes]:
        try:
            for chunk in self.response.iter_bytes():
                if chunk:
                    yield chunk
        except httpx.HTTPError as exc:
            raise to_transport_error(exc, provider=PROVIDER_NAME, model=self._model) from exc

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._closer()

    def __enter__(self) -> "ByteStream":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class AsyncByteStream:
    """Async twin of :class:`ByteStream`; owns its ``httpx.AsyncClient``."""

    def __init__(self, response: httpx.Response, closer: Callable[[], Any], *, model: Optional[str] = None) -> None:
        self.response = response
        self._closer = closer
        self._model = model
        self._closed = False

    async def __aiter__(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self.response.aiter_bytes():
                if chunk:
                    yield chunk
        except httpx.HTTPError as exc:
            raise to_transport_error(exc, provider=PROVIDER_NAME, model=self._model) from exc

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._closer()

    async def __aenter__(self) -> "AsyncByteStream":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


class TransportClient:
    """HTTP transport bound to one set of :class:`ProviderSettings`.

    Parameters:
        settings: Resolved connection settings.
        client: Optional sync client (tests inject one backed by
            ``httpx.MockTransport``); defaults to the shared pool.
        async_client_factory: Optional factory for async clients.
        logger: Optional logger; defaults to ``genai.gemini.transport``.
    """

    def __init__(
        self,
        settings: ProviderSettings,
        *,
        client: Optional[httpx.Client] = None,
        async_client_factory: Optional[Callable[[], httpx.AsyncClient]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.settings = settings
        self._client = client
        self._async_client_factory = async_client_factory
        self._logger = logger or get_logger("gemini.transport")

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    # ------------------------------------------------------------ plumbing
    def _sync_client(self, purpose: str) -> httpx.Client:
        return self._client if self._client is not None else get_httpx_client(None, purpose)

    def _async_client(self) -> httpx.AsyncClient:
        if self._async_client_factory is not None:
            return self._async_client_factory()
        return get_async_httpx_client(None, "gemini.stream")

    def _headers(self, extra: Optional[Mapping[str, str]] = None, *, json_body: bool = True) -> Dict[str, str]:
        if not self.settings.api_key:
            raise ConfigurationError(
                code=ErrorCode.AUTH,
                message="api_key cannot be empty",
                provider=PROVIDER_NAME,
            )
        headers: Dict[str, str] = {API_KEY_HEADER: self.settings.api_key}
        if json_body:
            headers["Content-Type"] = "application/json"
        headers.update(self.settings.headers)
        if extra:
            headers.update(extra)
        return headers

    @staticmethod
    def _timeout(seconds: Optional[float], *, streaming: bool = False, upload: bool = False) -> httpx.Timeout:
        cfg = get_timeout_config()
        if seconds is None:
            return cfg.for_httpx(streaming=streaming, upload=upload)
        return httpx.Timeout(seconds, connect=cfg.connect_timeout_seconds)

    def _ctx(self, operation: str, model: Optional[str]) -> LogContext:
        return LogContext(provider=PROVIDER_NAME, model=model, operation=operation)

    # ------------------------------------------------------------- streams
    def open_stream(self, request: TransportRequest) -> ByteStream:
        """Open a streaming POST and return its body as a :class:`ByteStream`.

        Raises:
            TransportError: connection failure, timeout or non-2xx status
                (the response body is included in the message).
            ConfigurationError: no API key configured.
        """
        url = self.settings.versioned_url(request.endpoint)
        headers = self._headers(request.headers)
        params = {**request.params, "alt": "sse"}
        timeout = self._timeout(request.timeout_seconds, streaming=True)
        client = self._sync_client("gemini.stream")
        ctx = self._ctx("stream.open", request.model)

        def _open() -> ByteStream:
            req = client.build_request("POST", url, json=request.body, headers=headers, params=params, timeout=timeout)
            try:
                response = client.send(req, stream=True)
            except httpx.HTTPError as exc:
                raise to_transport_error(exc, provider=PROVIDER_NAME, model=request.model) from exc
            if response.status_code >= 400:
                try:
                    body = response.read().decode("utf-8", errors="replace")
                finally:
                    response.close()
                raise _status_error(response, model=request.model, body=body)
            return ByteStream(response, response.close, model=request.model)

        cfg = build_retry_config(self._logger, ctx, phase="stream.open", max_attempts=request.max_attempts)
        return retry(cfg)(_open)()

    async def aopen_stream(self, request: TransportRequest) -> AsyncByteStream:
        """Async twin of :meth:`open_stream` using a dedicated ``httpx.AsyncClient``."""
        url = self.settings.versioned_url(request.endpoint)
        headers = self._headers(request.headers)
        params = {**request.params, "alt": "sse"}
        timeout = self._timeout(request.timeout_seconds, streaming=True)
        ctx = self._ctx("stream.open", request.model)

        async def _open() -> AsyncByteStream:
            client = self._async_client()
            try:
                req = client.build_request("POST", url, json=request.body, headers=headers, params=params, timeout=timeout)
                response = await client.send(req, stream=True)
            except httpx.HTTPError as exc:
                await client.aclose()
                raise to_transport_error(exc, provider=PROVIDER_NAME, model=request.model) from exc
            if response.status_code >= 400:
                try:
                    body = (await response.aread()).decode("utf-8", errors="replace")
                finally:
                    await response.aclose()
                    await client.aclose()
                raise _status_error(response, model=request.model, body=body)

            async def _close() -> None:
                try:
                    await response.aclose()
                finally:
                    await client.aclose()

            return AsyncByteStream(response, _close, model=request.model)

        cfg = build_retry_config(self._logger, ctx, phase="stream.open", max_attempts=request.max_attempts)
        return await async_retry(cfg)(_open)()

    # ------------------------------------------------------------ requests
    def request(
        self,
        method: str,
        endpoint: str,
        body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        *,
        timeout_seconds: Optional[float] = None,
        max_attempts: Optional[int] = None,
        model: Optional[str] = None,
        url: Optional[str] = None,
        content: Optional[bytes] = None,
        upload: bool = False,
    ) -> httpx.Response:
        """Send a non-streaming request and return the successful response.

        ``endpoint`` is resolved under the versioned base URL unless an
        absolute ``url`` is given (resumable upload sessions). Raw ``content``
        replaces the JSON body.

        Raises:
            TransportError: connection failure, timeout or non-2xx status.
            ConfigurationError: no API key configured.
        """
        target = url or self.settings.versioned_url(endpoint)
        req_headers = self._headers(headers, json_body=content is None and body is not None)
        timeout = self._timeout(timeout_seconds, upload=upload)
        client = self._sync_client("gemini.upload" if upload else "gemini.request")
        ctx = self._ctx(f"{method.lower()} {endpoint}", model)

        def _call() -> httpx.Response:
            try:
                response = client.request(
                    method,
                    target,
                    json=body if content is None else None,
                    content=content,
                    params=params,
                    headers=req_headers,
                    timeout=timeout,
                )
            except httpx.HTTPError as exc:
                raise to_transport_error(exc, provider=PROVIDER_NAME, model=model) from exc
            if response.status_code >= 400:
                raise _status_error(response, model=model, body=response.text)
            return response

        normalized_log_event(
            self._logger,
            "request.start",
            ctx,
            phase="start",
            attempt=None,
            emitted=None,
            tokens=None,
            method=method,
            level=logging.DEBUG,
        )
        t0 = time.perf_counter()
        cfg = build_retry_config(self._logger, ctx, phase="request", max_attempts=max_attempts)
        try:
            response = retry(cfg)(_call)()
        except TransportError as err:
            normalized_log_event(
                self._logger,
                "request.error",
                ctx,
                phase="finalize",
                attempt=None,
                emitted=False,
                tokens=None,
                error_code=err.code.value,
                status_code=err.status_code,
                level=logging.WARNING,
            )
            raise
        normalized_log_event(
            self._logger,
            "request.end",
            ctx,
            phase="finalize",
            attempt=None,
            emitted=True,
            tokens=None,
            status_code=response.status_code,
            latency_ms=round((time.perf_counter() - t0) * 1000.0, 2),
            level=logging.DEBUG,
        )
        return response

    def close(self) -> None:
        """Close an injected client (pooled clients are closed at exit)."""
        if self._client is not None:
            with suppress(Exception):
                self._client.close()


__all__ = [
    "API_KEY_HEADER",
    "TransportRequest",
    "ByteStream",
    "AsyncByteStream",
    "TransportClient",
]
