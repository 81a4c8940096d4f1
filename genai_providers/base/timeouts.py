"""Unified timeout configuration for the HTTP transport.

Timeouts are owned by the transport, never by the stream assembler: a read
that exceeds the stream idle timeout surfaces as an ``httpx.ReadTimeout``,
which the transport converts into a ``TransportError`` with code ``timeout``.

Key Components
--------------
TimeoutConfig
    Frozen dataclass of normalized timeout values (seconds).

get_timeout_config()
    Returns a process-cached configuration, parsing environment overrides on
    first use and again whenever one of them changes. Supported variables
    (all optional):
        PT_TIMEOUT_CONNECT_SECONDS
        PT_TIMEOUT_STREAM_SECONDS
        PT_TIMEOUT_HTTP_SECONDS
        PT_TIMEOUT_UPLOAD_SECONDS

TimeoutConfig.for_httpx(streaming)
    Builds the ``httpx.Timeout`` used by the pooled clients.
"""
from __future__ import annotations

from dataclasses import dataclass
import os

import httpx


# TimeoutConfig field -> environment override
_ENV_FIELDS = {
    "connect_timeout_seconds": "PT_TIMEOUT_CONNECT_SECONDS",
    "stream_timeout_seconds": "PT_TIMEOUT_STREAM_SECONDS",
    "http_timeout_seconds": "PT_TIMEOUT_HTTP_SECONDS",
    "upload_timeout_seconds": "PT_TIMEOUT_UPLOAD_SECONDS",
}


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Establishing the TCP/TLS connection.
        stream_timeout_seconds: Idle read timeout between two chunks of a
            streaming body.
        http_timeout_seconds: Read timeout for regular (non-streaming) calls.
        upload_timeout_seconds: Write/read timeout for file uploads.
    """

    connect_timeout_seconds: float = 10.0
    stream_timeout_seconds: float = 60.0
    http_timeout_seconds: float = 30.0
    upload_timeout_seconds: float = 300.0

    def for_httpx(self, *, streaming: bool = False, upload: bool = False) -> httpx.Timeout:
        """Return an ``httpx.Timeout`` for the given call shape."""
        if upload:
            read = self.upload_timeout_seconds
        elif streaming:
            read = self.stream_timeout_seconds
        else:
            read = self.http_timeout_seconds
        return httpx.Timeout(read, connect=self.connect_timeout_seconds)


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Parse a positive float from the environment, falling back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(os.getenv(name, "") for name in _ENV_FIELDS.values())
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        **{field: _parse_env_float(env, getattr(defaults, field)) for field, env in _ENV_FIELDS.items()}
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
]
