"""Helpers to build SSE byte streams for assembler tests."""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, Iterator, List, Optional


def text_payload(text: str, finish: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    candidate: Dict[str, Any] = {"content": {"parts": [{"text": text}], "role": "model"}}
    if finish is not None:
        candidate["finishReason"] = finish
    payload: Dict[str, Any] = {"candidates": [candidate]}
    payload.update(extra)
    return payload


def call_payload(name: str, args: Any, finish: Optional[str] = None) -> Dict[str, Any]:
    candidate: Dict[str, Any] = {"content": {"parts": [{"functionCall": {"name": name, "args": args}}]}}
    if finish is not None:
        candidate["finishReason"] = finish
    return {"candidates": [candidate]}


def sse(payload: Any) -> bytes:
    """Encode one ``data:`` line (dict payloads are JSON encoded)."""
    body = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
    return f"data: {body}\n".encode("utf-8")


def sse_stream(*payloads: Any) -> bytes:
    return b"".join(sse(p) for p in payloads)


def split_at(data: bytes, *offsets: int) -> List[bytes]:
    """Split ``data`` at the given byte offsets."""
    out: List[bytes] = []
    prev = 0
    for off in sorted(offsets):
        out.append(data[prev:off])
        prev = off
    out.append(data[prev:])
    return [c for c in out if c]


def failing_after(chunks: Iterable[bytes], exc: BaseException) -> Iterator[bytes]:
    """Yield ``chunks`` then raise ``exc`` like a transport dropping the connection."""
    yield from chunks
    raise exc


class ClosableChunks:
    """Chunk iterator that records whether ``close()`` was called."""

    def __init__(self, chunks: Iterable[bytes]) -> None:
        self._it = iter(chunks)
        self.closed = False
        self.consumed = 0

    def __iter__(self) -> "ClosableChunks":
        return self

    def __next__(self) -> bytes:
        chunk = next(self._it)
        self.consumed += 1
        return chunk

    def close(self) -> None:
        self.closed = True


async def async_chunks(chunks: Iterable[bytes]):
    for chunk in chunks:
        yield chunk
