"""Cooperative cancellation primitives (public API facade).

``CancellationToken`` lets a caller stop a stream from outside the consuming
loop (another thread, a UI callback). The stream controller polls the token
between events; once cancelled, the stream is closed, the transport released
and no further events are produced. ``CancelledError`` is raised only by
``raise_if_cancelled`` and never escapes a stream iteration.
"""

from .cancellation_parts.cancelled_error import CancelledError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError"]
