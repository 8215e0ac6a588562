"""Streaming engine: parsers, liveness monitor, transport, base client."""

from .chunk_parser import (
    ChunkCallback,
    ChunkParser,
    FrameDelta,
    FrameTranslator,
    NdjsonChunkParser,
    SseChunkParser,
    error_text,
)
from .liveness import LivenessMonitor, LivenessState
from .streaming_client import BaseStreamingClient, PreparedRequest, json_headers
from .streaming_finalize import finalize_stream
from .streaming_metrics import StreamMetrics
from .transport import StreamRequest, StreamTransport

__all__ = [
    "ChunkCallback",
    "ChunkParser",
    "FrameDelta",
    "FrameTranslator",
    "SseChunkParser",
    "NdjsonChunkParser",
    "error_text",
    "LivenessMonitor",
    "LivenessState",
    "BaseStreamingClient",
    "PreparedRequest",
    "json_headers",
    "finalize_stream",
    "StreamMetrics",
    "StreamRequest",
    "StreamTransport",
]
