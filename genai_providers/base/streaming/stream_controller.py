"""Cancellable iterator facade over an event stream.

``StreamController`` lets code outside the consuming loop stop a stream.
Cancellation is cooperative: the controller checks its token before handing
out each event, so at most the event already being produced is delivered.
Stopping closes the underlying generator, which releases the transport.
"""
from __future__ import annotations

from contextlib import suppress
from typing import Iterator, Optional

from ..cancellation import CancellationToken
from ..errors import TransportError
from .stream_event import StreamEvent


class StreamController:
    """Cancellable wrapper around an iterator of :class:`StreamEvent`.

    Responsibilities:
      * Iterate over events until the terminal one or until cancelled.
      * Expose ``cancel(reason)`` for cooperative cancellation.
      * Track the terminal event for post-hoc inspection.
    """

    def __init__(self, events: Iterator[StreamEvent], token: CancellationToken | None = None) -> None:
        self._events = events
        self._token = token or CancellationToken()
        self._finished = False
        self._terminal_event: StreamEvent | None = None

    def __iter__(self) -> Iterator[StreamEvent]:
        try:
            for evt in self._events:
                if self._token.cancelled:
                    return
                if evt.is_final:
                    self._finished = True
                    self._terminal_event = evt
                yield evt
                if self._token.cancelled:
                    return
        finally:
            close = getattr(self._events, "close", None)
            if callable(close):
                close()

    def cancel(self, reason: str | None = None) -> None:
        """Request cancellation of the underlying stream.

        Safe to invoke multiple times or after completion.
        """
        with suppress(Exception):
            self._token.cancel(reason)

    @property
    def token(self) -> CancellationToken:
        return self._token

    @property
    def cancelled(self) -> bool:
        return self._token.cancelled

    @property
    def finished(self) -> bool:  # noqa: D401 - short property
        """Whether the stream has emitted its terminal event."""
        return self._finished

    @property
    def terminal_event(self) -> StreamEvent | None:  # noqa: D401 - short property
        """Return the captured terminal event if iteration has completed."""
        return self._terminal_event

    @property
    def error(self) -> Optional[TransportError]:  # noqa: D401 - short property
        """Return the transport error carried by the terminal event (if any)."""
        return self._terminal_event.error if self._terminal_event else None


__all__ = ["StreamController"]
