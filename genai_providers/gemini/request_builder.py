"""Request body construction for generate, stream and token counting calls.

Pure functions only: nothing here performs I/O, so the wire format can be
tested in isolation from the transport.

Accepted prompt shapes (``normalize_conversation``):
    * ``"a prompt"`` -> one user turn with a single text part
    * ``[{"role": "user", "parts": [...]}, ...]`` -> used as-is
    * ``["text", {"uri": ..., "mimeType": ...}, ...]`` -> one user turn whose
      parts are text and ``file_data`` references to uploaded files
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from ..base.dto.generate_config import GenerateContentConfig

Conversation = List[Dict[str, Any]]
PromptInput = Union[str, Sequence[Any]]

# snake_case config field -> generationConfig key
_GENERATION_FIELDS = (
    ("temperature", "temperature"),
    ("top_p", "topP"),
    ("top_k", "topK"),
    ("candidate_count", "candidateCount"),
    ("max_output_tokens", "maxOutputTokens"),
    ("stop_sequences", "stopSequences"),
    ("response_logprobs", "responseLogprobs"),
    ("logprobs", "logprobs"),
    ("presence_penalty", "presencePenalty"),
    ("frequency_penalty", "frequencyPenalty"),
    ("seed", "seed"),
    ("response_mime_type", "responseMimeType"),
    ("response_schema", "responseSchema"),
    ("response_modalities", "responseModalities"),
    ("routing_config", "routingConfig"),
    ("media_resolution", "mediaResolution"),
    ("speech_config", "speechConfig"),
    ("audio_timestamp", "audioTimestamp"),
    ("automatic_function_calling", "automaticFunctionCalling"),
    ("thinking_config", "thinkingConfig"),
)


def build_generation_config(config: Optional[GenerateContentConfig]) -> Dict[str, Any]:
    """Return the ``generationConfig`` object holding only the fields that are set."""
    if config is None:
        return {}
    out: Dict[str, Any] = {}
    for attr, key in _GENERATION_FIELDS:
        value = getattr(config, attr)
        if value is not None:
            out[key] = value
    return out


def _is_turn(item: Any) -> bool:
    return isinstance(item, Mapping) and "role" in item and "parts" in item


def _file_part(item: Mapping[str, Any]) -> Dict[str, Any]:
    uri = item.get("uri") or item.get("file_uri")
    mime = item.get("mimeType") or item.get("mime_type")
    if not uri or not mime:
        raise TypeError("file references need 'uri' and 'mimeType'")
    return {"file_data": {"file_uri": str(uri), "mime_type": str(mime)}}


def convert_contents(items: Sequence[Any]) -> List[Dict[str, Any]]:
    """Convert mixed strings and uploaded-file mappings into request parts.

    Raises:
        TypeError: an item is neither a string nor a file mapping.
    """
    parts: List[Dict[str, Any]] = []
    for item in items:
        if isinstance(item, str):
            parts.append({"text": item})
        elif isinstance(item, Mapping):
            parts.append(_file_part(item))
        else:
            raise TypeError(f"Unsupported content type in contents: {type(item).__name__}")
    return parts


def normalize_conversation(prompt: PromptInput) -> Conversation:
    """Normalize the accepted prompt shapes into a list of ``{role, parts}`` turns.

    Raises:
        TypeError: unsupported prompt type or content item.
        ValueError: empty conversation.
    """
    if isinstance(prompt, str):
        return [{"role": "user", "parts": [{"text": prompt}]}]
    if isinstance(prompt, (bytes, bytearray)) or not isinstance(prompt, Sequence):
        raise TypeError(f"Unsupported prompt type: {type(prompt).__name__}")
    items = list(prompt)
    if not items:
        raise ValueError("conversation must not be empty")
    if all(_is_turn(t) for t in items):
        return [{"role": t["role"], "parts": list(t["parts"])} for t in items]
    if any(_is_turn(t) for t in items):
        raise TypeError("cannot mix conversation turns with plain content items")
    return [{"role": "user", "parts": convert_contents(items)}]


def _system_instruction(value: Union[str, Mapping[str, Any]]) -> Dict[str, Any]:
    if isinstance(value, str):
        return {"parts": [{"text": value}]}
    return dict(value)


def build_generate_body(contents: Conversation, config: Optional[GenerateContentConfig] = None) -> Dict[str, Any]:
    """Build the JSON body shared by generateContent and streamGenerateContent."""
    body: Dict[str, Any] = {"contents": contents}
    generation_config = build_generation_config(config)
    if generation_config:
        body["generationConfig"] = generation_config
    if config is None:
        return body
    if config.system_instruction:
        body["systemInstruction"] = _system_instruction(config.system_instruction)
    if config.tools is not None:
        body["tools"] = config.tools
    if config.tool_config is not None:
        body["toolConfig"] = config.tool_config
    if config.safety_settings is not None:
        body["safetySettings"] = [s.to_wire() for s in config.safety_settings]
    if config.cached_content is not None:
        body["cachedContent"] = config.cached_content
    if config.labels is not None:
        body["labels"] = config.labels
    return body


def build_count_tokens_body(contents: Conversation) -> Dict[str, Any]:
    return {"contents": contents}


def build_embed_request(model_path: str, text: str) -> Dict[str, Any]:
    """One ``embedContent`` request (also an entry of ``batchEmbedContents``)."""
    return {"model": model_path, "content": {"parts": [{"text": text}]}}


__all__ = [
    "Conversation",
    "PromptInput",
    "build_generation_config",
    "convert_contents",
    "normalize_conversation",
    "build_generate_body",
    "build_count_tokens_body",
    "build_embed_request",
]
