"""Base streaming client shared by every protocol family.

Purpose:
    Encapsulate the per-call lifecycle boilerplate so protocol clients only
    describe *what* to send and *how* to read a frame:

    1. ``prepare`` builds the request (pure, no network for OpenAI/Gemini;
       Player2 also resolves its connection). Configuration problems raise
       ``ConfigurationError`` here, before any request is issued.
    2. ``stream`` logs ``stream.start``, drives the ``StreamTransport`` with a
       fresh parser, then returns a ``Payload`` or raises a ``ProviderError``
       carrying the partial ``Payload``.
    3. ``on_stream_failure`` lets a protocol react to a failed call (Player2
       invalidates its local credential cache there).

Each call owns its parser, monitor, and HTTP client; nothing is shared
between concurrent calls made on the same client instance.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Mapping, Optional, Sequence, Type

from ..cancellation import CancellationToken
from ..errors import ProviderError
from ..logging import LogContext, get_logger, log_event, normalized_log_event
from ..models import Message, Payload, Protocol, ProviderConfig
from ..timeouts import TimeoutConfig
from .chunk_parser import ChunkCallback, ChunkParser, FrameDelta
from .streaming_finalize import finalize_stream
from .streaming_metrics import StreamMetrics
from .transport import StreamRequest, StreamTransport


@dataclass(frozen=True)
class PreparedRequest:
    """Everything needed to issue one call, plus what the ``Payload`` reports.

    Attributes:
        request: URL, serialized body, and headers sent on the wire.
        endpoint: Endpoint recorded in logs and the ``Payload`` (no secrets).
        model: Model identifier, ``None`` for protocols without one.
        timeouts: Liveness budgets for this endpoint.
        context: Protocol-specific facts needed after the call (e.g. whether
            a local credential was used).
    """

    request: StreamRequest
    endpoint: str
    model: Optional[str]
    timeouts: TimeoutConfig
    context: Mapping[str, Any] = field(default_factory=dict)


def json_headers(api_key: Optional[str] = None, extra: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Standard request headers: JSON content type, bearer auth when a key is set."""
    headers = {"Content-Type": "application/json"}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    if extra:
        headers.update(extra)
    return headers


class BaseStreamingClient(ABC):
    """Template for a protocol client; subclasses set ``protocol`` and ``parser_class``."""

    protocol: ClassVar[Protocol]
    parser_class: ClassVar[Type[ChunkParser]]

    def __init__(
        self,
        *,
        transport: Optional[StreamTransport] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._transport = transport or StreamTransport()
        self._logger = logger or get_logger(f"providers.{self.protocol.value}")

    @property
    def provider_name(self) -> str:
        return self.protocol.value

    # -- protocol hooks ---------------------------------------------------
    @abstractmethod
    async def prepare(
        self,
        config: ProviderConfig,
        instruction: str,
        messages: Sequence[Message],
    ) -> PreparedRequest:
        """Build the wire request; raise ``ConfigurationError`` on bad config."""

    @abstractmethod
    def translate_frame(self, frame: Mapping[str, Any]) -> FrameDelta:
        """Extract text, usage, or an error from one decoded frame."""

    def on_stream_failure(self, prepared: PreparedRequest, error: ProviderError) -> None:
        """Called once when an issued request fails (default: nothing)."""

    # -- lifecycle --------------------------------------------------------
    async def stream(
        self,
        config: ProviderConfig,
        instruction: str,
        messages: Sequence[Message],
        on_chunk: Optional[ChunkCallback] = None,
        *,
        cancellation: Optional[CancellationToken] = None,
    ) -> Payload:
        """Run one streaming call to a terminal state.

        Returns:
            Payload: endpoint, model, request body, full text, token count.

        Raises:
            ConfigurationError: before any network attempt.
            ProviderError: any other failure kind, with ``payload`` attached.
        """
        ctx = LogContext(provider=self.provider_name, model=config.model)
        try:
            prepared = await self.prepare(config, instruction, list(messages))
        except ProviderError as err:
            finalize_stream(logger=self._logger, ctx=ctx, metrics=StreamMetrics(), error=err)
            raise

        ctx = LogContext(
            provider=self.provider_name,
            model=prepared.model,
            endpoint=prepared.endpoint,
            extra=dict(prepared.context),
        )
        normalized_log_event(
            self._logger,
            "stream.start",
            ctx,
            phase="start",
            emitted=0,
            connect_timeout_s=prepared.timeouts.connect_timeout_seconds,
            read_timeout_s=prepared.timeouts.read_timeout_seconds,
        )
        log_event(self._logger, "stream.request", ctx, level=logging.DEBUG, body=prepared.request.body)

        debug = self._logger.isEnabledFor(logging.DEBUG)
        parser = self.parser_class(self.translate_frame, on_chunk, keep_raw=debug)
        try:
            await self._transport.run(
                prepared.request,
                parser,
                prepared.timeouts,
                provider=self.provider_name,
                model=prepared.model,
                cancellation=cancellation,
            )
        except ProviderError as err:
            err.payload = self._payload(prepared, parser)
            self.on_stream_failure(prepared, err)
            finalize_stream(logger=self._logger, ctx=ctx, metrics=parser.metrics, error=err)
            raise
        except Exception as exc:
            finalize_stream(logger=self._logger, ctx=ctx, metrics=parser.metrics, error=exc)
            raise

        if debug:
            log_event(self._logger, "stream.response", ctx, level=logging.DEBUG, raw=parser.raw_text)
        finalize_stream(logger=self._logger, ctx=ctx, metrics=parser.metrics)
        return self._payload(prepared, parser)

    @staticmethod
    def _payload(prepared: PreparedRequest, parser: ChunkParser) -> Payload:
        return Payload(
            endpoint=prepared.endpoint,
            model=prepared.model,
            request_body=prepared.request.body,
            text=parser.full_text,
            total_tokens=parser.total_tokens,
        )


__all__ = ["BaseStreamingClient", "PreparedRequest", "json_headers"]
