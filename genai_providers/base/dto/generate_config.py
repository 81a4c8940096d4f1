"""
Generation configuration DTOs.

Purpose
-------
``GenerateContentConfig`` collects the optional knobs of a generate/stream
call: sampling parameters that end up in ``generationConfig``, request-level
fields (tools, safety settings, cached content, system instruction) and
per-call HTTP options. It is pure data; the request builder maps it to the
camelCase wire format.

External dependencies: Pydantic v2 only.

Failure modes
-------------
Invalid types or out-of-range values raise ``pydantic.ValidationError`` at
construction time, before any request is built.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .safety_setting import SafetySetting


class HttpOptions(BaseModel):
    """Per-call HTTP overrides.

    Attributes
    ----------
    timeout_seconds:
        Read timeout override for this call only.
    retries:
        Maximum number of attempts for retryable failures (1 disables retry).
    headers:
        Extra headers sent with the request.
    """

    timeout_seconds: Optional[float] = Field(default=None, gt=0)
    retries: Optional[int] = Field(default=None, ge=1)
    headers: Dict[str, str] = Field(default_factory=dict)


class GenerateContentConfig(BaseModel):
    """Optional model configuration for generate and stream calls.

    Field names follow Python conventions; see ``request_builder`` for the
    mapping onto the API's camelCase keys. Every field defaults to ``None``
    and unset fields are omitted from the request body.
    """

    model_config = ConfigDict(extra="forbid")

    http_options: Optional[HttpOptions] = None
    system_instruction: Optional[Union[str, Dict[str, Any]]] = None
    temperature: Optional[float] = Field(default=None, ge=0.0)
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    top_k: Optional[float] = Field(default=None, ge=0.0)
    candidate_count: Optional[int] = Field(default=None, ge=1)
    max_output_tokens: Optional[int] = Field(default=None, ge=1)
    stop_sequences: Optional[List[str]] = None
    response_logprobs: Optional[bool] = None
    logprobs: Optional[int] = None
    presence_penalty: Optional[float] = None
    frequency_penalty: Optional[float] = None
    seed: Optional[int] = None
    response_mime_type: Optional[str] = None
    response_schema: Optional[Dict[str, Any]] = None
    routing_config: Optional[Dict[str, Any]] = None
    safety_settings: Optional[List[SafetySetting]] = None
    tools: Optional[List[Dict[str, Any]]] = None
    tool_config: Optional[Dict[str, Any]] = None
    labels: Optional[Dict[str, str]] = None
    cached_content: Optional[str] = None
    response_modalities: Optional[List[str]] = None
    media_resolution: Optional[str] = None
    speech_config: Optional[Dict[str, Any]] = None
    audio_timestamp: Optional[bool] = None
    automatic_function_calling: Optional[Dict[str, Any]] = None
    thinking_config: Optional[Dict[str, Any]] = None


__all__ = ["GenerateContentConfig", "HttpOptions"]
