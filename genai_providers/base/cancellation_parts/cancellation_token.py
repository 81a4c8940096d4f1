"""Thread-safe cancellation token with parent to child cascading."""

from __future__ import annotations

import time
from threading import Event, Lock
from typing import Callable, List, Optional

from .cancelled_error import CancelledError
from .state import State

Callback = Callable[[Optional[str]], None]


class CancellationToken:
    """Flag that a stream consumer polls to learn it should stop.

    ``cancel`` may be called from any thread; it is idempotent and the first
    reason wins. Tokens created with ``parent=`` (or via ``child()``) are
    cancelled together with their parent, never the other way round.
    Callbacks registered with ``on_cancel`` run once, on the cancelling
    thread, after the flag is set.
    """

    def __init__(self, *, parent: "CancellationToken | None" = None) -> None:
        self._flag = Event()
        self._lock = Lock()
        self._state = State()
        self._children: List[CancellationToken] = []
        if parent is not None:
            parent.link_child(self)

    @property
    def cancelled(self) -> bool:
        return self._flag.is_set()

    @property
    def reason(self) -> str | None:
        return self._state.reason

    @property
    def cancelled_at(self) -> float | None:
        """``time.monotonic()`` value recorded by the first ``cancel``."""
        return self._state.cancelled_at

    def cancel(self, reason: str | None = None) -> None:
        with self._lock:
            if self._flag.is_set():
                return
            self._state.reason = reason
            self._state.cancelled_at = time.monotonic()
            self._flag.set()
            callbacks, self._state.callbacks = self._state.callbacks, []
            children = list(self._children)
        for callback in callbacks:
            callback(reason)
        for child in children:
            child.cancel(reason)

    def on_cancel(self, callback: Callback) -> None:
        """Run ``callback(reason)`` on cancellation (immediately if already cancelled)."""
        with self._lock:
            if not self._flag.is_set():
                self._state.callbacks.append(callback)
                return
        callback(self._state.reason)

    def link_child(self, token: "CancellationToken") -> "CancellationToken":
        with self._lock:
            self._children.append(token)
            already = self._flag.is_set()
        if already:
            token.cancel(self._state.reason)
        return token

    def child(self) -> "CancellationToken":
        return CancellationToken(parent=self)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or ``timeout`` elapses; return ``cancelled``."""
        return self._flag.wait(timeout)

    def raise_if_cancelled(self) -> None:
        if self._flag.is_set():
            raise CancelledError(self._state.reason or "operation cancelled")

    def __repr__(self) -> str:  # pragma: no cover
        return f"CancellationToken(cancelled={self.cancelled}, reason={self.reason!r})"


__all__ = ["CancellationToken"]
