"""Error raised by ``CancellationToken.raise_if_cancelled``."""

from __future__ import annotations


class CancelledError(RuntimeError):
    """A cancelled token was asked to raise; the message is the cancel reason."""


__all__ = ["CancelledError"]
