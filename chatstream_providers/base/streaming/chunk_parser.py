"""Incremental, framing-aware response body parsers.

A parser consumes raw bytes in arrival order (``feed``), splits them into
complete lines, strips the protocol framing, decodes the JSON frame, and hands
it to a protocol-specific *frame translator*. Text deltas returned by the
translator are appended to the accumulated text and forwarded to the caller's
chunk callback synchronously, one call per delta, in wire order.

Framing:
    - ``SseChunkParser``: server-sent events; only ``data:`` lines carry a
      frame, ``[DONE]`` is a terminator, other field lines are ignored.
    - ``NdjsonChunkParser``: one JSON object per line.

Partial trailing lines stay buffered as bytes until a newline arrives, so a
multi-byte UTF-8 sequence split across network reads decodes correctly.
``flush`` processes whatever remains once the transport completes.

Once a frame reports an error (or is malformed) the message is recorded in
``detected_error`` and no further frames are translated; the transport turns
it into a terminal error.
"""
from __future__ import annotations

import json
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, List, Mapping, Optional

from .streaming_metrics import StreamMetrics


@dataclass(frozen=True)
class FrameDelta:
    """What a translator extracted from one decoded frame."""

    text: Optional[str] = None
    total_tokens: Optional[int] = None
    error: Optional[str] = None


FrameTranslator = Callable[[Mapping[str, Any]], FrameDelta]
ChunkCallback = Callable[[str], None]


class ChunkParser(ABC):
    """Base incremental parser; subclasses define ``frame_body``.

    Raw lines are only retained when ``keep_raw`` is set (the client sets it
    when DEBUG logging is enabled).
    """

    framing: ClassVar[str] = "lines"

    def __init__(
        self,
        translator: FrameTranslator,
        on_chunk: Optional[ChunkCallback] = None,
        *,
        clock: Callable[[], float] = time.perf_counter,
        keep_raw: bool = False,
    ) -> None:
        self._translator = translator
        self._on_chunk = on_chunk
        self._clock = clock
        self._t0 = clock()
        self._buffer = bytearray()
        self._parts: List[str] = []
        self._raw_lines: List[str] = []
        self._keep_raw = keep_raw
        self.total_tokens = 0
        self.detected_error: Optional[str] = None
        self.metrics = StreamMetrics()

    # -- input ------------------------------------------------------------
    def feed(self, data: bytes) -> None:
        """Consume a slice of the response body."""
        if not data:
            return
        self.metrics.received_bytes += len(data)
        self._buffer.extend(data)
        while True:
            idx = self._buffer.find(b"\n")
            if idx < 0:
                return
            line = bytes(self._buffer[:idx])
            del self._buffer[: idx + 1]
            self._consume_line(line)

    def flush(self) -> None:
        """Process a trailing line that never received its newline."""
        if self._buffer:
            line = bytes(self._buffer)
            self._buffer.clear()
            self._consume_line(line)

    # -- results ----------------------------------------------------------
    @property
    def full_text(self) -> str:
        return "".join(self._parts)

    @property
    def raw_text(self) -> str:
        """The response body as received (empty unless ``keep_raw``)."""
        return "\n".join(self._raw_lines)

    # -- framing ----------------------------------------------------------
    @abstractmethod
    def frame_body(self, line: str) -> Optional[str]:
        """Return the JSON text carried by ``line`` or ``None`` to skip it."""

    def _consume_line(self, raw: bytes) -> None:
        line = raw.decode("utf-8", errors="replace").rstrip("\r")
        if self._keep_raw:
            self._raw_lines.append(line)
        if self.detected_error is not None:
            return
        body = self.frame_body(line)
        if body is None:
            return
        try:
            frame = json.loads(body)
        except json.JSONDecodeError:
            self.detected_error = f"malformed frame: {body[:200]}"
            return
        if not isinstance(frame, dict):
            self.detected_error = f"unexpected frame: {body[:200]}"
            return
        delta = self._translator(frame)
        if delta.total_tokens is not None:
            self.total_tokens = delta.total_tokens
            self.metrics.total_tokens = delta.total_tokens
        if delta.error:
            self.detected_error = delta.error
            return
        if delta.text:
            self._emit(delta.text)

    def _emit(self, text: str) -> None:
        if self.metrics.emitted == 0:
            self.metrics.time_to_first_chunk_ms = (self._clock() - self._t0) * 1000.0
        self.metrics.emitted += 1
        self._parts.append(text)
        if self._on_chunk is not None:
            self._on_chunk(text)


class SseChunkParser(ChunkParser):
    """Server-sent event framing (``data: {...}`` lines)."""

    framing = "sse"

    def frame_body(self, line: str) -> Optional[str]:
        if not line.startswith("data:"):
            return None
        body = line[5:].strip()
        if not body or body == "[DONE]":
            return None
        return body


class NdjsonChunkParser(ChunkParser):
    """Newline-delimited JSON framing.

    A stray ``data:`` prefix is tolerated so gateways that wrap the same
    objects in SSE still parse.
    """

    framing = "ndjson"

    def frame_body(self, line: str) -> Optional[str]:
        body = line.strip()
        if body.startswith("data:"):
            body = body[5:].strip()
        if not body or body == "[DONE]":
            return None
        return body


def error_text(value: Any) -> Optional[str]:
    """Flatten an ``error`` field (string or ``{"message": ...}`` object)."""
    if value is None or value is False:
        return None
    if isinstance(value, Mapping):
        message = value.get("message") or value.get("status") or json.dumps(dict(value), ensure_ascii=False)
        code = value.get("code")
        return f"{code}: {message}" if code is not None else str(message)
    return str(value)


__all__ = [
    "FrameDelta",
    "FrameTranslator",
    "ChunkCallback",
    "ChunkParser",
    "SseChunkParser",
    "NdjsonChunkParser",
    "error_text",
]
