"""
Mapping of raised exceptions and HTTP answers onto :class:`ErrorCode`.

``classify_exception`` is used for anything the transport catches;
``status_to_code`` for non-2xx answers; ``to_transport_error`` wraps an
arbitrary exception so the stream assembler always attaches a
:class:`TransportError` to a failed terminal event.
"""
from __future__ import annotations

import asyncio
from typing import Dict, Optional, Tuple

import httpx

from .error_code import RETRYABLE_CODES, ErrorCode
from .provider_error import ProviderError
from .transport_error import TransportError

_MESSAGE_LIMIT = 500

_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}

# google.rpc status names found in Generative Language error bodies
_RPC_STATUS_MAP: Dict[str, ErrorCode] = {
    "INVALID_ARGUMENT": ErrorCode.VALIDATION,
    "FAILED_PRECONDITION": ErrorCode.VALIDATION,
    "UNAUTHENTICATED": ErrorCode.AUTH,
    "PERMISSION_DENIED": ErrorCode.AUTH,
    "NOT_FOUND": ErrorCode.NOT_FOUND,
    "ALREADY_EXISTS": ErrorCode.CONFLICT,
    "RESOURCE_EXHAUSTED": ErrorCode.RATE_LIMIT,
    "DEADLINE_EXCEEDED": ErrorCode.TIMEOUT,
    "UNAVAILABLE": ErrorCode.UNAVAILABLE,
    "CANCELLED": ErrorCode.CANCELLED,
    "INTERNAL": ErrorCode.SERVER_ERROR,
}

# checked in order; first match wins
_MESSAGE_PATTERNS: Tuple[Tuple[ErrorCode, Tuple[str, ...]], ...] = (
    (ErrorCode.TIMEOUT, ("timeout", "timed out")),
    (ErrorCode.TRANSIENT, ("connection reset", "connection aborted", "broken pipe")),
    (ErrorCode.AUTH, ("api key", "unauthorized", "forbidden")),
    (ErrorCode.UNSUPPORTED, ("unsupported", "not supported")),
    (ErrorCode.NOT_FOUND, ("not found", "does not exist")),
    (ErrorCode.UNAVAILABLE, ("unavailable", "temporarily down")),
    (ErrorCode.VALIDATION, ("validation", "invalid", "malformed")),
    (ErrorCode.SERVER_ERROR, ("server error", "internal error")),
)


def _valid_status(value: object) -> Optional[int]:
    return value if isinstance(value, int) and 100 <= value < 600 else None


def _extract_status(exc: BaseException) -> Optional[int]:
    """HTTP status from ``exc.status_code``, ``exc.status`` or ``exc.response.status_code``."""
    for value in (
        getattr(exc, "status_code", None),
        getattr(exc, "status", None),
        getattr(getattr(exc, "response", None), "status_code", None),
    ):
        status = _valid_status(value)
        if status is not None:
            return status
    return None


def status_to_code(status: int) -> ErrorCode:
    """Map an HTTP status; unlisted 5xx become ``server_error`` and unlisted 4xx ``validation``."""
    code = _HTTP_STATUS_MAP.get(status)
    if code is not None:
        return code
    if status >= 500:
        return ErrorCode.SERVER_ERROR
    if status >= 400:
        return ErrorCode.VALIDATION
    return ErrorCode.UNKNOWN


def rpc_status_to_code(status: Optional[str]) -> Optional[ErrorCode]:
    """Map a ``google.rpc`` status name (``error.status`` in API bodies)."""
    if not status:
        return None
    return _RPC_STATUS_MAP.get(status.strip().upper())


def _code_from_message(message: str) -> ErrorCode:
    lowered = message.lower()
    if "rate" in lowered and "limit" in lowered:
        return ErrorCode.RATE_LIMIT
    for code, needles in _MESSAGE_PATTERNS:
        if any(n in lowered for n in needles):
            return code
    return ErrorCode.UNKNOWN


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify ``exc``.

    Order: ``ProviderError`` keeps its code, then timeouts, then other
    network failures (``transient``), then an HTTP status when one can be
    found, then message keywords, else ``unknown``.
    """
    if isinstance(exc, ProviderError):
        return exc.code
    if isinstance(exc, (httpx.TimeoutException, TimeoutError, asyncio.TimeoutError)):
        return ErrorCode.TIMEOUT
    if isinstance(exc, (httpx.TransportError, ConnectionError)):
        return ErrorCode.TRANSIENT
    status = _extract_status(exc)
    if status is not None:
        return status_to_code(status)
    return _code_from_message(str(exc))


def to_transport_error(
    exc: BaseException,
    *,
    provider: str = "gemini",
    model: Optional[str] = None,
) -> TransportError:
    """Wrap ``exc`` in a :class:`TransportError`; an existing one is returned as-is."""
    if isinstance(exc, TransportError):
        return exc
    code = classify_exception(exc)
    return TransportError(
        code=code,
        message=(str(exc) or type(exc).__name__)[:_MESSAGE_LIMIT],
        provider=provider,
        model=model,
        retryable=code in RETRYABLE_CODES,
        raw=exc,
        status_code=_extract_status(exc),
    )


__all__ = [
    "classify_exception",
    "status_to_code",
    "rpc_status_to_code",
    "to_transport_error",
]
