"""Retry decorators for Generative Language API calls.

Only :class:`ProviderError` instances whose code is in
``RetryConfig.retryable_codes`` are retried (by default ``transient``,
``rate_limit`` and ``timeout``). Delays grow as ``delay_base ** attempt``;
a server supplied ``Retry-After`` (``TransportError.retry_after``) raises
the delay for that attempt, and ``max_delay`` caps every delay.
"""
from __future__ import annotations

import asyncio
import functools
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterator, Optional, Protocol, Tuple, TypeVar

from ..errors import RETRYABLE_CODES, ErrorCode, ProviderError

T = TypeVar("T")


class AttemptLogger(Protocol):  # pragma: no cover - structural protocol
    def __call__(
        self,
        *,
        attempt: int,
        max_attempts: int,
        delay: float | None,
        error: ProviderError | None,
    ) -> None: ...


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 3
    delay_base: float = 2.0
    max_delay: Optional[float] = None
    retryable_codes: Tuple[ErrorCode, ...] = RETRYABLE_CODES
    attempt_logger: AttemptLogger | None = None

    def schedule(self) -> list[float | None]:
        """Base delay before each retry; the last attempt gets ``None``."""
        delays: list[float | None] = [self.delay_base**n for n in range(max(self.max_attempts, 1) - 1)]
        return delays + [None]

    def delay_after(self, base: float, error: ProviderError) -> float:
        delay = max(base, getattr(error, "retry_after", None) or 0.0)
        return min(delay, self.max_delay) if self.max_delay is not None else delay

    def notify(self, attempt: int, delay: float | None, error: ProviderError | None) -> None:
        if self.attempt_logger is not None:
            self.attempt_logger(attempt=attempt, max_attempts=self.max_attempts, delay=delay, error=error)


DEFAULT_RETRY_CONFIG = RetryConfig()
NO_RETRY = RetryConfig(max_attempts=1)


def _plan(config: RetryConfig, error: ProviderError, attempt: int, base: float | None) -> float | None:
    """Log the failed attempt and return the sleep before the next one, or ``None`` to give up."""
    if base is None or error.code not in config.retryable_codes:
        config.notify(attempt, None, error)
        return None
    delay = config.delay_after(base, error)
    config.notify(attempt, delay, error)
    return delay


def _attempts(config: RetryConfig) -> Iterator[Tuple[int, float | None]]:
    return enumerate(config.schedule())


def retry(config: RetryConfig = DEFAULT_RETRY_CONFIG):
    """Decorate a function so retryable provider errors are retried with backoff."""

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            for attempt, base in _attempts(config):
                try:
                    result = func(*args, **kwargs)
                except ProviderError as exc:
                    delay = _plan(config, exc, attempt, base)
                    if delay is None:
                        raise
                    time.sleep(delay)
                    continue
                config.notify(attempt, None, None)
                return result
            raise AssertionError("unreachable: the last attempt either returns or raises")

        return wrapper

    return decorator


def async_retry(config: RetryConfig = DEFAULT_RETRY_CONFIG):
    """Coroutine variant of :func:`retry`; sleeps with ``asyncio.sleep``."""

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            for attempt, base in _attempts(config):
                try:
                    result = await func(*args, **kwargs)
                except ProviderError as exc:
                    delay = _plan(config, exc, attempt, base)
                    if delay is None:
                        raise
                    await asyncio.sleep(delay)
                    continue
                config.notify(attempt, None, None)
                return result
            raise AssertionError("unreachable: the last attempt either returns or raises")

        return wrapper

    return decorator


__all__ = [
    "RetryConfig",
    "DEFAULT_RETRY_CONFIG",
    "NO_RETRY",
    "retry",
    "async_retry",
]
