"""
Transport-level failure raised by the HTTP transport.

Covers connection failures, timeouts and non-2xx responses, whether they occur
before the first byte or in the middle of a streaming body. The stream
assembler never re-raises it; it is attached to the terminal event instead.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .provider_error import ProviderError


@dataclass
class TransportError(ProviderError):
    """HTTP or network failure with optional response details.

    Attributes:
        status_code: HTTP status when the server answered with a non-2xx code.
        body: Decoded response body (truncated) for non-2xx answers.
        retry_after: Seconds from a ``Retry-After`` header, when one was sent.
    """

    status_code: Optional[int] = None
    body: Optional[str] = None
    retry_after: Optional[float] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        status = f" (status {self.status_code})" if self.status_code is not None else ""
        return f"{self.provider}:{self.model or '-'} {self.code.value}{status}: {self.message}"


__all__ = ["TransportError"]
