"""Stream transport: one HTTP POST driven by the liveness monitor.

Purpose:
    Issue the streaming request, pipe response bytes into a ``ChunkParser``
    and supervise progress with a ``LivenessMonitor`` until a terminal state.

Mechanics:
    - The body is read by a reader task (``httpx.AsyncClient.stream``). Every
      received slice bumps a byte counter and is fed to the parser
      synchronously, so chunk callbacks run on the reader task in wire order.
    - The supervising coroutine polls at ``poll_interval_seconds``. Each tick
      first checks the host cancellation token, then waits for the reader,
      then feeds the byte counter to the monitor.
    - Aborting means cancelling the reader task, which closes the response
      and the client. The monitor guarantees the abort fires once.

Terminal mapping:
    ``COMPLETED``          -> returns ``StreamMetrics`` (or raises if the
                              parser detected a stream error)
    ``CONNECT_TIMED_OUT``  -> ``ConnectTimeoutError``
    ``READ_TIMED_OUT``     -> ``ReadTimeoutError``
    ``CANCELLED``          -> ``StreamCancelledError``
    HTTP >= 400            -> ``AuthError`` (401/403) or ``TransportError``
    connection failures    -> ``TransportError``
"""
from __future__ import annotations

import asyncio
import time
from contextlib import suppress
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional

import httpx

from ..cancellation import CancellationToken
from ..errors import (
    ConnectTimeoutError,
    ErrorCode,
    ProtocolError,
    ProviderError,
    ReadTimeoutError,
    StreamCancelledError,
    classify_exception,
    error_for,
    is_auth_message,
)
from ..errors_parts.classification import _extract_status
from ..http import ClientFactory, create_async_client, stream_timeout
from ..timeouts import TimeoutConfig
from .chunk_parser import ChunkParser
from .liveness import LivenessMonitor, LivenessState
from .streaming_metrics import StreamMetrics

_ERROR_BODY_LIMIT = 500


@dataclass(frozen=True)
class StreamRequest:
    """A fully built streaming request."""

    url: str
    body: str
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass
class _Progress:
    received: int = 0


class StreamTransport:
    """Perform one streaming POST under liveness supervision."""

    def __init__(
        self,
        *,
        client_factory: ClientFactory = create_async_client,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client_factory = client_factory
        self._clock = clock

    async def run(
        self,
        request: StreamRequest,
        parser: ChunkParser,
        timeouts: TimeoutConfig,
        *,
        provider: str,
        model: Optional[str] = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> StreamMetrics:
        """Drive ``request`` to a terminal state; see module docstring."""
        t0 = self._clock()
        progress = _Progress()
        reader = asyncio.create_task(self._read(request, parser, progress, timeouts))
        monitor = LivenessMonitor(timeouts, clock=self._clock, abort=reader.cancel)
        try:
            while True:
                if cancellation is not None and cancellation.cancelled:
                    monitor.cancel()
                    break
                await asyncio.wait({reader}, timeout=timeouts.poll_interval_seconds)
                if reader.done():
                    break
                if monitor.poll(progress.received).terminal:
                    break
        finally:
            if not reader.done():
                reader.cancel()
            with suppress(asyncio.CancelledError):
                await asyncio.gather(reader, return_exceptions=True)
            parser.metrics.total_duration_ms = (self._clock() - t0) * 1000.0

        state = monitor.state
        if state is LivenessState.CANCELLED:
            raise StreamCancelledError(cancellation.reason or "cancelled by host", provider, model)
        if state is LivenessState.CONNECT_TIMED_OUT:
            raise ConnectTimeoutError(
                f"connection timed out (waited {timeouts.connect_timeout_seconds:g}s for first byte)",
                provider,
                model,
            )
        if state is LivenessState.READ_TIMED_OUT:
            raise ReadTimeoutError(
                f"read timed out (stalled for {timeouts.read_timeout_seconds:g}s during generation)",
                provider,
                model,
            )

        exc = reader.exception()
        if exc is not None:
            mapped = self._map_failure(exc, provider, model)
            if mapped is exc:
                raise exc
            raise mapped from exc

        parser.flush()
        monitor.complete()
        if parser.detected_error is not None:
            detected = parser.detected_error
            if is_auth_message(detected):
                raise error_for(ErrorCode.AUTH, f"stream error: {detected}", provider, model)
            raise ProtocolError(f"stream error: {detected}", provider, model)
        return parser.metrics

    async def _read(
        self,
        request: StreamRequest,
        parser: ChunkParser,
        progress: _Progress,
        timeouts: TimeoutConfig,
    ) -> None:
        client = self._client_factory(timeout=stream_timeout(timeouts.connect_timeout_seconds))
        async with client:
            async with client.stream(
                "POST",
                request.url,
                content=request.body.encode("utf-8"),
                headers=dict(request.headers),
            ) as response:
                if response.is_error:
                    body = await response.aread()
                    progress.received += len(body)
                    response.raise_for_status()
                async for chunk in response.aiter_bytes():
                    progress.received += len(chunk)
                    parser.feed(chunk)

    @staticmethod
    def _map_failure(exc: BaseException, provider: str, model: Optional[str]) -> BaseException:
        """Translate reader failures into ``ProviderError`` kinds.

        Exceptions that are not network failures (for example one raised by
        the caller's chunk callback) are returned unchanged.
        """
        if isinstance(exc, ProviderError):
            return exc
        if not isinstance(exc, (httpx.HTTPError, OSError, TimeoutError)):
            return exc
        code = classify_exception(exc)
        status = _extract_status(exc)
        if isinstance(exc, httpx.HTTPStatusError):
            detail = exc.response.text[:_ERROR_BODY_LIMIT].strip()
            message = f"HTTP {status}: {detail}" if detail else f"HTTP {status}"
        else:
            message = f"{exc.__class__.__name__}: {exc}".rstrip(": ")
        return error_for(code, message, provider, model, status_code=status)


__all__ = ["StreamRequest", "StreamTransport"]
