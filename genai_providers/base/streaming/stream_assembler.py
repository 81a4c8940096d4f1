"""Stream assembler: raw SSE bytes in, ordered ``StreamEvent`` values out.

Lifecycle of one stream::

    bytes chunks -> ChunkBuffer.feed -> "data: {...}" lines
        -> decode_payload -> text / function call / inline parts
        -> StreamEvent(delta, running full_text, ...)
        -> exactly one terminal event (is_final=True)

Guarantees:
  * ``full_text`` of every event equals the concatenation of all
    ``delta_text`` values emitted so far.
  * A text payload identical to one already emitted is not emitted again.
  * The last event is always final; nothing follows it.
  * Transport failures never raise out of the iterator: they become the
    ``error`` field of the terminal event.
  * Malformed lines and undecodable function arguments are logged and
    skipped.
  * When the consumer stops early (``close()``, ``break``, cancellation)
    the transport is closed and no terminal event is produced.

An assembler instance serves one stream; call ``iter_events`` (sync),
``aiter_events`` (async) or ``pump`` (push into a bounded queue) once.
"""
from __future__ import annotations

import asyncio
import logging
import time
from contextlib import suppress
from typing import Any, AsyncIterable, AsyncIterator, Dict, Iterable, Iterator, List, Optional

from ..cancellation import CancellationToken
from ..dto.function_call import FunctionCallFragment
from ..errors import ArgumentDecodingError, MalformedChunkError, TransportError, to_transport_error
from ..logging import LogContext, get_logger, log_event, normalized_log_event
from ..models import InlineImage
from .chunk_buffer import ChunkBuffer
from .sse_payload import (
    DATA_PREFIX,
    DONE_SENTINEL,
    FunctionCallPart,
    InlineDataPart,
    TextPart,
    decode_arguments,
    decode_inline,
    decode_payload,
)
from .stream_event import StreamEvent
from .streaming_finalize import finalize_stream
from .streaming_metrics import StreamMetrics, apply_usage_metadata

DEFAULT_FINISH_REASON = "STOP"


class StreamAssembler:
    """Turn the byte chunks of one streamGenerateContent body into events."""

    def __init__(
        self,
        *,
        provider: str = "gemini",
        model: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
        cancellation_token: Optional[CancellationToken] = None,
        buffer: Optional[ChunkBuffer] = None,
    ) -> None:
        self.provider = provider
        self.model = model
        self.ctx = LogContext(provider=provider, model=model, operation="stream")
        self._logger = logger or get_logger("streaming")
        self._token = cancellation_token
        self._buffer = buffer or ChunkBuffer()
        self._full_text: List[str] = []
        self._calls: List[FunctionCallFragment] = []
        self._usage: Optional[Dict[str, Any]] = None
        self._data_flowed = False
        self._finished = False
        self._started = False
        self._t0 = 0.0
        self.metrics = StreamMetrics()

    # ------------------------------------------------------------------ state
    @property
    def full_text(self) -> str:
        return "".join(self._full_text)

    @property
    def finished(self) -> bool:
        """Whether the terminal event has been produced."""
        return self._finished

    def _claim(self) -> None:
        if self._started:
            raise RuntimeError("StreamAssembler instances are single-use")
        self._started = True
        self._t0 = time.perf_counter()
        log_event(self._logger, "stream.start", self.ctx)

    def _elapsed_ms(self) -> float:
        return (time.perf_counter() - self._t0) * 1000.0

    def _cancelled(self) -> bool:
        return self._token is not None and self._token.cancelled

    # -------------------------------------------------------------- line path
    def _process_line(self, line: str) -> Optional[StreamEvent]:
        """Handle one complete line; return the event it produces, if any."""
        if not line.startswith(DATA_PREFIX):
            return None
        payload = line[len(DATA_PREFIX):]
        if payload.strip() == DONE_SENTINEL:
            return self._finish_eof()

        try:
            decoded = decode_payload(payload)
        except MalformedChunkError as exc:
            log_event(
                self._logger,
                "stream.decode_error",
                self.ctx,
                level=logging.WARNING,
                error=str(exc),
                line_preview=payload[:200],
            )
            return None

        if decoded.usage is not None:
            self._usage = decoded.usage
        if decoded.response_id and self.ctx.response_id is None:
            self.ctx.response_id = decoded.response_id

        texts: List[str] = []
        new_calls = False
        images: List[InlineImage] = []
        for part in decoded.parts:
            if isinstance(part, TextPart):
                texts.append(part.text)
            elif isinstance(part, FunctionCallPart):
                fragment = self._decode_call(part)
                if fragment is not None:
                    self._calls.append(fragment)
                    new_calls = True
            elif isinstance(part, InlineDataPart):
                image = self._decode_image(part)
                if image is not None:
                    images.append(image)

        delta = ""
        current_text = "".join(texts)
        if current_text.strip() and self._buffer.remember(current_text):
            delta = current_text
            self._full_text.append(delta)
            if self.metrics.time_to_first_token_ms is None:
                self.metrics.time_to_first_token_ms = self._elapsed_ms()
        if delta or new_calls:
            self._data_flowed = True

        reason = decoded.terminal_reason
        if reason is not None:
            return self._terminal(finish_reason=reason, delta_text=delta, images=images)
        if not (delta or new_calls or images):
            return None

        self.metrics.emitted += 1
        if self._logger.isEnabledFor(logging.DEBUG):
            log_event(
                self._logger,
                "stream.delta",
                self.ctx,
                level=logging.DEBUG,
                delta_len=len(delta),
                function_calls=len(self._calls),
                images=len(images) or None,
            )
        return StreamEvent(
            delta_text=delta,
            full_text=self.full_text,
            function_call_fragments=tuple(self._calls),
            images=tuple(images),
        )

    def _decode_call(self, part: FunctionCallPart) -> Optional[FunctionCallFragment]:
        try:
            return FunctionCallFragment(name=part.name, arguments=decode_arguments(part.raw_args))
        except ArgumentDecodingError as exc:
            log_event(
                self._logger,
                "stream.args_error",
                self.ctx,
                level=logging.WARNING,
                function=part.name,
                error=str(exc),
            )
            return None

    def _decode_image(self, part: InlineDataPart) -> Optional[InlineImage]:
        try:
            return decode_inline(part)
        except MalformedChunkError as exc:
            log_event(
                self._logger,
                "stream.decode_error",
                self.ctx,
                level=logging.WARNING,
                error=str(exc),
                mime_type=part.mime_type,
            )
            return None

    # ------------------------------------------------------------ terminals
    def _terminal(
        self,
        *,
        finish_reason: Optional[str] = None,
        delta_text: str = "",
        error: Optional[TransportError] = None,
        images: Iterable[InlineImage] = (),
    ) -> StreamEvent:
        self._finished = True
        self.metrics.total_duration_ms = self._elapsed_ms()
        apply_usage_metadata(self.metrics, self._usage)
        return finalize_stream(
            logger=self._logger,
            ctx=self.ctx,
            metrics=self.metrics,
            full_text=self.full_text,
            function_calls=self._calls,
            delta_text=delta_text,
            finish_reason=finish_reason,
            error=error,
            usage=self._usage,
            images=tuple(images),
        )

    def _finish_eof(self) -> StreamEvent:
        """Terminal event for ``[DONE]`` or end of body without a finish reason."""
        return self._terminal(finish_reason=DEFAULT_FINISH_REASON if self._data_flowed else None)

    def _finish_error(self, exc: BaseException) -> StreamEvent:
        error = to_transport_error(exc, provider=self.provider, model=self.model)
        return self._terminal(error=error)

    def _log_cancelled(self) -> None:
        normalized_log_event(
            self._logger,
            "stream.cancelled",
            self.ctx,
            phase="finalize",
            attempt=None,
            error_code="cancelled",
            emitted=self.metrics.emitted > 0,
            tokens=None,
            emitted_count=self.metrics.emitted,
            reason=self._token.reason if self._cancelled() else None,
        )

    def _release(self, *sources: Any) -> None:
        for src in sources:
            close = getattr(src, "close", None)
            if callable(close):
                with suppress(Exception):
                    close()
        self._buffer.clear()
        if not self._finished:
            self._log_cancelled()

    async def _arelease(self, *sources: Any) -> None:
        for src in sources:
            aclose = getattr(src, "aclose", None)
            if callable(aclose):
                with suppress(Exception):
                    await aclose()
                continue
            close = getattr(src, "close", None)
            if callable(close):
                with suppress(Exception):
                    close()
        self._buffer.clear()
        if not self._finished:
            self._log_cancelled()

    # ----------------------------------------------------------------- APIs
    def iter_events(self, chunks: Iterable[bytes]) -> Iterator[StreamEvent]:
        """Synchronously assemble ``chunks`` into events.

        Closing the returned generator early closes ``chunks`` (when it has a
        ``close`` method) and produces no terminal event.
        """
        self._claim()
        iterator: Any = None
        try:
            try:
                iterator = iter(chunks)
            except Exception as exc:
                yield self._finish_error(exc)
                return
            while True:
                if self._cancelled():
                    return
                try:
                    chunk = next(iterator)
                except StopIteration:
                    break
                except Exception as exc:
                    yield self._finish_error(exc)
                    return
                for line in self._buffer.feed(chunk):
                    event = self._process_line(line)
                    if event is None:
                        continue
                    yield event
                    if self._finished or self._cancelled():
                        return
            tail = self._buffer.flush()
            if tail is not None:
                event = self._process_line(tail)
                if event is not None:
                    yield event
                    if self._finished or self._cancelled():
                        return
            yield self._finish_eof()
        finally:
            self._release(iterator, chunks)

    async def aiter_events(self, chunks: AsyncIterable[bytes]) -> AsyncIterator[StreamEvent]:
        """Async twin of :meth:`iter_events` over an async byte iterator."""
        self._claim()
        iterator: Any = None
        try:
            try:
                iterator = chunks.__aiter__()
            except Exception as exc:
                yield self._finish_error(exc)
                return
            while True:
                if self._cancelled():
                    return
                try:
                    chunk = await iterator.__anext__()
                except StopAsyncIteration:
                    break
                except asyncio.CancelledError:
                    raise
                except Exception as exc:
                    yield self._finish_error(exc)
                    return
                for line in self._buffer.feed(chunk):
                    event = self._process_line(line)
                    if event is None:
                        continue
                    yield event
                    if self._finished or self._cancelled():
                        return
            tail = self._buffer.flush()
            if tail is not None:
                event = self._process_line(tail)
                if event is not None:
                    yield event
                    if self._finished or self._cancelled():
                        return
            yield self._finish_eof()
        finally:
            await self._arelease(iterator, chunks)

    async def pump(self, chunks: AsyncIterable[bytes], queue: "asyncio.Queue[StreamEvent]") -> None:
        """Push every event into ``queue``, waiting whenever it is full.

        Returns after the terminal event has been enqueued. Cancelling the
        task running ``pump`` closes the transport; no terminal event is
        enqueued in that case.
        """
        events = self.aiter_events(chunks)
        try:
            async for event in events:
                await queue.put(event)
        finally:
            await events.aclose()


__all__ = ["StreamAssembler", "DEFAULT_FINISH_REASON"]
