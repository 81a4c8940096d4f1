"""DTO describing a function call requested by the model.

A streamed or non-streamed ``functionCall`` part is normalized into a
``FunctionCallFragment``: the function name and a JSON-like mapping of
arguments, regardless of whether the wire carried ``args`` as an object or as
an embedded JSON string.
"""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class FunctionCallFragment(BaseModel):
    """A function call observed in model output.

    Parameters
    ----------
    name:
        The function/tool name suggested by the model.
    arguments:
        Decoded arguments mapping. Defaults to an empty mapping.

    Notes
    -----
    - Frozen so fragments can be shared between successive stream events
      without risk of mutation.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)

    def to_wire(self) -> Dict[str, Any]:
        """Return the ``functionCall`` part shape used in conversation turns."""
        return {"functionCall": {"name": self.name, "args": dict(self.arguments)}}


__all__ = ["FunctionCallFragment"]
