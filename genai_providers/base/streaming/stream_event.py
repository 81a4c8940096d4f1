"""Stream event emitted by the stream assembler.

Keeps the consumer-facing data shape separate from the assembling logic so
callers and tests can import it without pulling in the transport.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from ..dto.function_call import FunctionCallFragment
from ..errors import TransportError
from ..models import InlineImage


@dataclass(frozen=True)
class StreamEvent:
    """One unit of streamed output.

    Fields:
      delta_text: text first observed in this event (may be empty)
      full_text: concatenation of every ``delta_text`` so far
      function_call_fragments: function calls observed so far in this stream
      finish_reason: provider finish code, only on the terminal event
      is_final: True exactly on the last event of the stream
      error: transport failure, only on an abnormal terminal event
      usage: last ``usageMetadata`` seen, only on the terminal event
      images: inline data decoded from this event's payload
    """

    delta_text: str = ""
    full_text: str = ""
    function_call_fragments: Tuple[FunctionCallFragment, ...] = ()
    finish_reason: Optional[str] = None
    is_final: bool = False
    error: Optional[TransportError] = None
    usage: Optional[Dict[str, Any]] = None
    images: Tuple[InlineImage, ...] = field(default_factory=tuple)

    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly view (image bytes reduced to their size)."""
        return {
            "delta_text": self.delta_text,
            "full_text": self.full_text,
            "function_call_fragments": [f.model_dump() for f in self.function_call_fragments],
            "finish_reason": self.finish_reason,
            "is_final": self.is_final,
            "error": str(self.error) if self.error is not None else None,
            "error_code": self.error.code.value if self.error is not None else None,
            "usage": self.usage,
            "images": [{"mime_type": i.mime_type, "size": len(i.data)} for i in self.images],
        }


__all__ = ["StreamEvent"]
