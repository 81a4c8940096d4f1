"""
ModelInfo DTO for model listings.

One entry of ``GET /models`` with the ``models/`` prefix stripped from the
name and camelCase fields mapped to snake_case.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Optional


@dataclass
class ModelInfo:
    """A single model listing entry.

    Attributes:
        name: Model id usable in calls (e.g. ``gemini-2.0-flash``).
        version: Model version string.
        display_name: Human-friendly name.
        description: Optional description.
        prompt_token_limit: ``inputTokenLimit``.
        output_token_limit: ``outputTokenLimit``.
        supported_generation_methods: e.g. ``["generateContent", "countTokens"]``.
        temperature, top_p, top_k: Model defaults when reported.
    """

    name: str
    version: Optional[str] = None
    display_name: Optional[str] = None
    description: Optional[str] = None
    prompt_token_limit: Optional[int] = None
    output_token_limit: Optional[int] = None
    supported_generation_methods: List[str] = field(default_factory=list)
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "ModelInfo":
        name = str(raw.get("name", ""))
        if name.startswith("models/"):
            name = name[len("models/"):]
        return cls(
            name=name,
            version=raw.get("version"),
            display_name=raw.get("displayName"),
            description=raw.get("description"),
            prompt_token_limit=raw.get("inputTokenLimit"),
            output_token_limit=raw.get("outputTokenLimit"),
            supported_generation_methods=list(raw.get("supportedGenerationMethods") or []),
            temperature=raw.get("temperature"),
            top_p=raw.get("topP"),
            top_k=raw.get("topK"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary representation of the entry."""
        return asdict(self)


__all__ = [
    "ModelInfo",
]
