"""Mutable state shared behind a ``CancellationToken``'s lock."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional


@dataclass
class State:
    """Reason, cancel time and pending callbacks of one token."""

    reason: Optional[str] = None
    cancelled_at: Optional[float] = None
    callbacks: List[Callable[[Optional[str]], None]] = field(default_factory=list)


__all__ = ["State"]
