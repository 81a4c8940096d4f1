"""GeminiProvider facade.

Talks to the Generative Language REST API directly over ``httpx`` (no SDK).
Wires the request builder, the transport and the stream assembler together
and exposes one method per API operation.

Streaming variants:
    * ``generate_content_stream``  -> iterator of ``StreamEvent``
    * ``agenerate_content_stream`` -> async iterator of ``StreamEvent``
    * ``stream_controller``        -> cancellable ``StreamController``
    * ``stream_to_queue``          -> bounded ``asyncio.Queue`` fed by a task

Streaming methods never raise transport failures; the terminal event carries
them. Invalid arguments (unsupported prompt shapes, missing API key) raise
immediately.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, AsyncIterator, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

import httpx

from ..base.cancellation import CancellationToken
from ..base.dto.generate_config import GenerateContentConfig
from ..base.dto.provider_settings import ProviderSettings
from ..base.errors import ConfigurationError, ErrorCode
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import EmbeddingResult, GenerateResponse, ModelInfo
from ..base.streaming import StreamAssembler, StreamController, StreamEvent
from ..config import get_provider_config, load_settings
from ..config.defaults import (
    GEMINI_DEFAULT_CACHE_TTL,
    GEMINI_DEFAULT_EMBEDDING_MODEL,
    GEMINI_DEFAULT_FILES_PAGE_SIZE,
    STREAM_QUEUE_CAPACITY,
)
from . import cache as cache_ops
from . import files as file_ops
from .helpers import PROVIDER_NAME, model_path
from .request_builder import (
    PromptInput,
    build_count_tokens_body,
    build_embed_request,
    build_generate_body,
    normalize_conversation,
)
from .response_parser import parse_embedding, parse_generate_response
from .transport import TransportClient, TransportRequest


class GeminiProvider:
    """Client for text generation, streaming, embeddings, caching and files.

    Parameters:
        api_key: API key; resolved from ``GEMINI_API_KEY`` / ``GOOGLE_API_KEY``
            (or the config file) when omitted.
        model: Default model for calls that do not name one.
        base_url / api_version: Endpoint overrides.
        settings: Fully resolved settings (skips the config merge).
        transport: Pre-built transport (tests inject one over ``httpx.MockTransport``).
        http_client: Sync client handed to the transport built here.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        api_version: Optional[str] = None,
        settings: Optional[ProviderSettings] = None,
        transport: Optional[TransportClient] = None,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        if transport is not None:
            settings = transport.settings
        if settings is None:
            settings = load_settings(
                require_api_key=False,
                api_key=api_key,
                model=model,
                base_url=base_url,
                api_version=api_version,
            )
        self.settings = settings
        self._logger = get_logger("gemini")
        self._transport = transport or TransportClient(settings, client=http_client)
        self._embedding_model = get_provider_config(PROVIDER_NAME).get("embedding_model", GEMINI_DEFAULT_EMBEDDING_MODEL)

    @property
    def provider_name(self) -> str:
        return PROVIDER_NAME

    @property
    def transport(self) -> TransportClient:
        return self._transport

    def default_model(self) -> str:
        return self.settings.model

    def _require_key(self) -> None:
        if not self.settings.api_key:
            raise ConfigurationError(
                code=ErrorCode.AUTH,
                message="api_key cannot be empty: set GEMINI_API_KEY (or GOOGLE_API_KEY)",
                provider=PROVIDER_NAME,
            )

    @staticmethod
    def _http_kwargs(config: Optional[GenerateContentConfig]) -> Dict[str, Any]:
        opts = config.http_options if config is not None else None
        if opts is None:
            return {"timeout_seconds": None, "max_attempts": None, "headers": {}}
        return {"timeout_seconds": opts.timeout_seconds, "max_attempts": opts.retries, "headers": dict(opts.headers)}

    # ------------------------------------------------------------ generate
    def generate_content(
        self,
        prompt: PromptInput,
        *,
        model: Optional[str] = None,
        config: Optional[GenerateContentConfig] = None,
    ) -> GenerateResponse:
        """Generate a complete response (``generateContent``).

        Raises:
            TransportError: the request failed.
            BlockedPromptError: the prompt was blocked before any candidate.
            ConfigurationError: no API key.
            TypeError: unsupported prompt shape.
        """
        self._require_key()
        model = model or self.settings.model
        body = build_generate_body(normalize_conversation(prompt), config)
        http = self._http_kwargs(config)
        ctx = LogContext(provider=PROVIDER_NAME, model=model, operation="generate")
        normalized_log_event(
            self._logger,
            "generate.start",
            ctx,
            phase="start",
            attempt=None,
            emitted=None,
            tokens=None,
            has_tools=bool(config and config.tools),
            cached_content=config.cached_content if config else None,
        )
        t0 = time.perf_counter()
        response = self._transport.request(
            "POST",
            f"{model_path(model)}:generateContent",
            body,
            headers=http["headers"],
            timeout_seconds=http["timeout_seconds"],
            max_attempts=http["max_attempts"],
            model=model,
        )
        result = parse_generate_response(response.json(), response.status_code, model=model)
        normalized_log_event(
            self._logger,
            "generate.end",
            ctx,
            phase="finalize",
            attempt=None,
            emitted=bool(result.text or result.function_calls or result.images),
            tokens=result.usage_metadata or None,
            finish_reason=result.finish_reason,
            latency_ms=round((time.perf_counter() - t0) * 1000.0, 2),
        )
        return result

    # ------------------------------------------------------------ streaming
    def _stream_request(
        self,
        prompt: PromptInput,
        model: Optional[str],
        config: Optional[GenerateContentConfig],
    ) -> TransportRequest:
        self._require_key()
        model = model or self.settings.model
        body = build_generate_body(normalize_conversation(prompt), config)
        http = self._http_kwargs(config)
        return TransportRequest(
            endpoint=f"{model_path(model)}:streamGenerateContent",
            body=body,
            headers=http["headers"],
            timeout_seconds=http["timeout_seconds"],
            max_attempts=http["max_attempts"],
            model=model,
        )

    def generate_content_stream(
        self,
        prompt: PromptInput,
        *,
        model: Optional[str] = None,
        config: Optional[GenerateContentConfig] = None,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> Iterator[StreamEvent]:
        """Stream a response as :class:`StreamEvent` values.

        The connection is opened lazily on the first ``next()``. The last
        event is always final; a transport failure is its ``error``.
        """
        request = self._stream_request(prompt, model, config)
        transport = self._transport

        def _chunks() -> Iterator[bytes]:
            with transport.open_stream(request) as stream:
                yield from stream

        assembler = StreamAssembler(provider=PROVIDER_NAME, model=request.model, cancellation_token=cancellation_token)
        return assembler.iter_events(_chunks())

    def agenerate_content_stream(
        self,
        prompt: PromptInput,
        *,
        model: Optional[str] = None,
        config: Optional[GenerateContentConfig] = None,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> AsyncIterator[StreamEvent]:
        """Async twin of :meth:`generate_content_stream` (use with ``async for``)."""
        request = self._stream_request(prompt, model, config)
        transport = self._transport

        async def _chunks() -> AsyncIterator[bytes]:
            stream = await transport.aopen_stream(request)
            try:
                async for chunk in stream:
                    yield chunk
            finally:
                await stream.aclose()

        assembler = StreamAssembler(provider=PROVIDER_NAME, model=request.model, cancellation_token=cancellation_token)
        return assembler.aiter_events(_chunks())

    def stream_controller(
        self,
        prompt: PromptInput,
        *,
        model: Optional[str] = None,
        config: Optional[GenerateContentConfig] = None,
        token: Optional[CancellationToken] = None,
    ) -> StreamController:
        """Return a :class:`StreamController` whose ``cancel()`` stops the stream."""
        token = token or CancellationToken()
        events = self.generate_content_stream(prompt, model=model, config=config, cancellation_token=token)
        return StreamController(events, token)

    def stream_to_queue(
        self,
        prompt: PromptInput,
        *,
        model: Optional[str] = None,
        config: Optional[GenerateContentConfig] = None,
        maxsize: int = STREAM_QUEUE_CAPACITY,
    ) -> Tuple["asyncio.Queue[StreamEvent]", "asyncio.Task[None]"]:
        """Start a producer task pushing events into a bounded queue.

        Must be called with a running event loop. The producer suspends while
        the queue is full; cancelling the task closes the connection.
        """
        request = self._stream_request(prompt, model, config)
        transport = self._transport
        queue: "asyncio.Queue[StreamEvent]" = asyncio.Queue(maxsize=maxsize)

        async def _chunks() -> AsyncIterator[bytes]:
            stream = await transport.aopen_stream(request)
            try:
                async for chunk in stream:
                    yield chunk
            finally:
                await stream.aclose()

        assembler = StreamAssembler(provider=PROVIDER_NAME, model=request.model)
        task = asyncio.get_running_loop().create_task(assembler.pump(_chunks(), queue))
        return queue, task

    # --------------------------------------------------------------- tokens
    def count_tokens(self, prompt: PromptInput, *, model: Optional[str] = None) -> int:
        """Number of tokens ``prompt`` takes for ``model`` (``countTokens``)."""
        self._require_key()
        model = model or self.settings.model
        body = build_count_tokens_body(normalize_conversation(prompt))
        response = self._transport.request("POST", f"{model_path(model)}:countTokens", body, model=model)
        return int(response.json().get("totalTokens", 0))

    def embed_content(
        self,
        prompt: Union[str, Sequence[str]],
        *,
        model: Optional[str] = None,
    ) -> EmbeddingResult:
        """Embed one text (``embedContent``) or several (``batchEmbedContents``)."""
        self._require_key()
        model = model or self._embedding_model
        path = model_path(model)
        if isinstance(prompt, str):
            response = self._transport.request("POST", f"{path}:embedContent", build_embed_request(path, prompt), model=model)
        else:
            body = {"requests": [build_embed_request(path, p) for p in prompt]}
            response = self._transport.request("POST", f"{path}:batchEmbedContents", body, model=model)
        return parse_embedding(response.json(), response.status_code)

    def list_models(self) -> List[ModelInfo]:
        """All models visible to the API key, following pagination."""
        self._require_key()
        models: List[ModelInfo] = []
        params: Dict[str, Any] = {}
        while True:
            payload = self._transport.request("GET", "models", params=params or None).json()
            models.extend(ModelInfo.from_api(m) for m in payload.get("models", []))
            token = payload.get("nextPageToken")
            if not token:
                return models
            params = {"pageToken": token}

    # ---------------------------------------------------------------- cache
    def create_cached_content(
        self,
        model: str,
        content: Union[str, Sequence[Mapping[str, Any]], Mapping[str, Any]],
        *,
        ttl: str = GEMINI_DEFAULT_CACHE_TTL,
        system_instruction: str = "",
    ) -> Dict[str, Any]:
        self._require_key()
        return cache_ops.create_cached_content(
            self._transport, model, content, ttl=ttl, system_instruction=system_instruction
        )

    def list_cached_content(self) -> List[Dict[str, Any]]:
        self._require_key()
        return cache_ops.list_cached_content(self._transport)

    def get_cached_content(self, name: str) -> Dict[str, Any]:
        self._require_key()
        return cache_ops.get_cached_content(self._transport, name)

    def update_cached_content(self, name: str, ttl: str) -> Dict[str, Any]:
        self._require_key()
        return cache_ops.update_cached_content(self._transport, name, ttl)

    def delete_cached_content(self, name: str) -> int:
        self._require_key()
        return cache_ops.delete_cached_content(self._transport, name)

    # ---------------------------------------------------------------- files
    def upload_file(self, path: str, *, display_name: str = "", mime_type: str = "") -> Dict[str, Any]:
        self._require_key()
        return file_ops.upload_file(self._transport, path, display_name=display_name, mime_type=mime_type, logger=self._logger)

    def get_file(self, name: str) -> Dict[str, Any]:
        self._require_key()
        return file_ops.get_file(self._transport, name)

    def list_files(self, *, page_size: int = GEMINI_DEFAULT_FILES_PAGE_SIZE, page_token: str = "") -> List[Dict[str, Any]]:
        self._require_key()
        return file_ops.list_files(self._transport, page_size=page_size, page_token=page_token)

    def delete_file(self, name: str) -> int:
        self._require_key()
        return file_ops.delete_file(self._transport, name)

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> "GeminiProvider":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


__all__ = ["GeminiProvider"]
