"""Decoding of individual ``data:`` payloads and their parts."""
from __future__ import annotations

import json

import pytest

from genai_providers.base.errors import ArgumentDecodingError, MalformedChunkError
from genai_providers.base.models import DEFAULT_INLINE_MIME_TYPE
from genai_providers.base.streaming.sse_payload import (
    FunctionCallPart,
    InlineDataPart,
    TextPart,
    UnknownPart,
    decode_arguments,
    decode_inline,
    decode_payload,
)


def test_parts_are_tagged_by_kind():
    payload = {
        "candidates": [
            {
                "content": {
                    "parts": [
                        {"text": "hi"},
                        {"functionCall": {"name": "f", "args": {"a": 1}}},
                        {"inlineData": {"mimeType": "image/png", "data": "AAAA"}},
                        {"executableCode": {"code": "print(1)"}},
                    ]
                },
                "finishReason": "STOP",
            },
            {"content": {"parts": [{"text": "second candidate ignored"}]}},
        ]
    }
    decoded = decode_payload(json.dumps(payload))
    kinds = [type(p) for p in decoded.parts]
    assert kinds == [TextPart, FunctionCallPart, InlineDataPart, UnknownPart]  # nosec B101
    assert decoded.finish_reason == "STOP"  # nosec B101
    assert decoded.terminal_reason == "STOP"  # nosec B101


def test_function_call_accepts_arguments_key():
    payload = {"candidates": [{"content": {"parts": [{"functionCall": {"name": "g", "arguments": '{"b": 2}'}}]}}]}
    part = decode_payload(json.dumps(payload)).parts[0]
    assert isinstance(part, FunctionCallPart)  # nosec B101
    assert decode_arguments(part.raw_args) == {"b": 2}  # nosec B101


def test_inline_data_without_mime_type_gets_default():
    payload = {"candidates": [{"content": {"parts": [{"inlineData": {"data": "AAAA"}}]}}]}
    part = decode_payload(json.dumps(payload)).parts[0]
    assert part.mime_type == DEFAULT_INLINE_MIME_TYPE  # nosec B101


@pytest.mark.parametrize("raw", ["{oops", "[1, 2]", "42", "null", '"text"'])
def test_non_object_payloads_raise(raw):
    with pytest.raises(MalformedChunkError):
        decode_payload(raw)


def test_missing_candidates_yields_empty_payload():
    decoded = decode_payload(json.dumps({"usageMetadata": {"totalTokenCount": 4}}))
    assert decoded.parts == ()  # nosec B101
    assert decoded.usage == {"totalTokenCount": 4}  # nosec B101
    assert decoded.terminal_reason is None  # nosec B101


@pytest.mark.parametrize("finish", [None, "", "FINISH_REASON_UNSPECIFIED"])
def test_non_terminal_finish_reasons(finish):
    candidate = {"content": {"parts": [{"text": "x"}]}}
    if finish is not None:
        candidate["finishReason"] = finish
    assert decode_payload(json.dumps({"candidates": [candidate]})).terminal_reason is None  # nosec B101


def test_block_reason_is_terminal_without_candidates():
    decoded = decode_payload(json.dumps({"promptFeedback": {"blockReason": "OTHER"}}))
    assert decoded.block_reason == "OTHER"  # nosec B101
    assert decoded.terminal_reason == "OTHER"  # nosec B101


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, {}),
        ("", {}),
        ({"k": "v"}, {"k": "v"}),
        ('{"n": 1}', {"n": 1}),
    ],
)
def test_decode_arguments_accepted_shapes(raw, expected):
    assert decode_arguments(raw) == expected  # nosec B101


@pytest.mark.parametrize("raw", ["{broken", "[1]", 12, ["x"]])
def test_decode_arguments_rejects_other_shapes(raw):
    with pytest.raises(ArgumentDecodingError):
        decode_arguments(raw)


def test_decode_inline_rejects_bad_base64():
    with pytest.raises(MalformedChunkError):
        decode_inline(InlineDataPart(mime_type="image/png", data="not base64!!"))


def test_decode_inline_returns_bytes():
    image = decode_inline(InlineDataPart(mime_type="image/png", data="aGk="))
    assert image.data == b"hi" and image.mime_type == "image/png"  # nosec B101


def test_response_id_is_read_with_or_without_candidates():
    assert decode_payload(json.dumps({"responseId": "r1", "candidates": []})).response_id == "r1"  # nosec B101
    with_candidate = {"responseId": "r2", "candidates": [{"content": {"parts": [{"text": "x"}]}}]}
    assert decode_payload(json.dumps(with_candidate)).response_id == "r2"  # nosec B101
    assert decode_payload(json.dumps({"responseId": 5})).response_id is None  # nosec B101
