"""Correlation fields shared by the log events of one operation."""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Who emitted an event and for which call.

    ``response_id`` is filled in by the stream assembler once Gemini reports a
    ``responseId``; later events of the same stream carry it.
    """

    provider: Optional[str] = None
    model: Optional[str] = None
    operation: Optional[str] = None
    response_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Flat mapping of the set fields, ``extra`` merged in last."""
        out = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "extra"}
        out.update(self.extra)
        return {k: v for k, v in out.items() if v is not None}


__all__ = ["LogContext"]
