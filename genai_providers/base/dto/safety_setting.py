"""Safety setting DTO with validated category and threshold values."""

from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, ConfigDict, field_validator


VALID_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
    "HARM_CATEGORY_CIVIC_INTEGRITY",
)

VALID_THRESHOLDS = (
    "BLOCK_NONE",
    "BLOCK_ONLY_HIGH",
    "BLOCK_MEDIUM_AND_ABOVE",
    "BLOCK_LOW_AND_ABOVE",
    "HARM_BLOCK_THRESHOLD_UNSPECIFIED",
)


class SafetySetting(BaseModel):
    """One entry of ``safetySettings``.

    Attributes:
        category: Harm category to filter; one of ``VALID_CATEGORIES``.
        threshold: Blocking sensitivity; one of ``VALID_THRESHOLDS``.

    Raises ``pydantic.ValidationError`` for values outside those sets.
    """

    model_config = ConfigDict(frozen=True)

    category: str
    threshold: str

    @field_validator("category")
    @classmethod
    def _check_category(cls, value: str) -> str:
        if value not in VALID_CATEGORIES:
            raise ValueError(f"Invalid category: {value!r}. Must be one of: {list(VALID_CATEGORIES)}")
        return value

    @field_validator("threshold")
    @classmethod
    def _check_threshold(cls, value: str) -> str:
        if value not in VALID_THRESHOLDS:
            raise ValueError(f"Invalid threshold: {value!r}. Must be one of: {list(VALID_THRESHOLDS)}")
        return value

    def to_wire(self) -> Dict[str, str]:
        return {"category": self.category, "threshold": self.threshold}


__all__ = ["SafetySetting", "VALID_CATEGORIES", "VALID_THRESHOLDS"]
