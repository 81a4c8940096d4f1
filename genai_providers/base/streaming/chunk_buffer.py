"""Line framing for server-sent-event bodies.

Network chunks arrive at arbitrary byte boundaries: a line may be split across
several chunks and one chunk may contain many lines. ``ChunkBuffer`` keeps the
unterminated remainder between calls and hands back complete lines only.
Lines are decoded after framing, so a multi-byte UTF-8 sequence split across
two chunks decodes correctly.

The buffer also owns the per-stream set of text fragments already emitted,
used to drop payloads the provider delivers twice.
"""
from __future__ import annotations

from typing import List, Optional, Set

DEFAULT_MAX_PENDING_BYTES = 32 * 1024 * 1024


class ChunkBuffer:
    """Accumulate raw bytes and split them into complete text lines.

    A line ends with ``\\n`` (optionally preceded by ``\\r``). Returned lines
    have trailing whitespace removed. Pending bytes are bounded by
    ``max_pending_bytes``; a single line longer than that is discarded up to
    its terminating newline.
    """

    def __init__(self, max_pending_bytes: int = DEFAULT_MAX_PENDING_BYTES) -> None:
        if max_pending_bytes <= 0:
            raise ValueError("max_pending_bytes must be positive")
        self._pending = bytearray()
        self._max_pending = max_pending_bytes
        self._discarding = False
        self._seen: Set[str] = set()

    @property
    def pending_size(self) -> int:
        return len(self._pending)

    @property
    def discarded_overflow(self) -> bool:
        """True while an oversized line is being skipped."""
        return self._discarding

    def feed(self, chunk: bytes) -> List[str]:
        """Append ``chunk`` and return every line it completes, in order."""
        if not chunk:
            return []
        self._pending.extend(chunk)
        lines: List[str] = []
        start = 0
        while True:
            idx = self._pending.find(b"\n", start)
            if idx < 0:
                break
            if self._discarding:
                self._discarding = False
            else:
                lines.append(self._decode(self._pending[start:idx]))
            start = idx + 1
        if start:
            del self._pending[:start]
        if len(self._pending) > self._max_pending:
            self._pending.clear()
            self._discarding = True
        return lines

    def flush(self) -> Optional[str]:
        """Return the unterminated remainder as a final line (``None`` if empty)."""
        if self._discarding or not self._pending:
            self._pending.clear()
            self._discarding = False
            return None
        line = self._decode(self._pending)
        self._pending.clear()
        return line or None

    def remember(self, text: str) -> bool:
        """Record ``text`` as emitted; return False if it was already seen."""
        if text in self._seen:
            return False
        self._seen.add(text)
        return True

    def clear(self) -> None:
        self._pending.clear()
        self._discarding = False
        self._seen.clear()

    @staticmethod
    def _decode(raw: bytes | bytearray) -> str:
        return bytes(raw).decode("utf-8", errors="replace").rstrip()


__all__ = ["ChunkBuffer", "DEFAULT_MAX_PENDING_BYTES"]
