"""Scripted ``httpx.MockTransport`` handlers for transport and provider tests."""

from __future__ import annotations

import json
from typing import Callable, List, Union

import httpx

from genai_providers.base.dto.provider_settings import ProviderSettings
from genai_providers.gemini import GeminiProvider, TransportClient

Reply = Union[httpx.Response, Callable[[httpx.Request], httpx.Response], BaseException]


class ScriptedHandler:
    """Answer requests in order from a list of replies and record every request.

    A reply may be a response, a callable building one from the request, or an
    exception to raise (simulating a connection failure).
    """

    def __init__(self, *replies: Reply) -> None:
        self.replies: List[Reply] = list(replies)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.replies:
            raise AssertionError(f"unexpected request {request.method} {request.url}")
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        if callable(reply):
            return reply(request)
        return reply

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def body(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)


def sse_response(*payloads: dict, done: bool = False, status: int = 200) -> httpx.Response:
    body = b"".join(f"data: {json.dumps(p)}\n\n".encode() for p in payloads)
    if done:
        body += b"data: [DONE]\n\n"
    return httpx.Response(status, content=body, headers={"Content-Type": "text/event-stream"})


def build_provider(settings: ProviderSettings, handler: ScriptedHandler) -> GeminiProvider:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    transport = TransportClient(
        settings,
        client=client,
        async_client_factory=lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    return GeminiProvider(transport=transport)
