"""Streaming metrics data structures.

Isolated within the streaming package to keep orchestration code small and cohesive.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class StreamMetrics:
    """Collected streaming metrics for a single call.

    Attributes:
        emitted: Number of chunk callbacks fired.
        received_bytes: Raw bytes read from the response body.
        time_to_first_chunk_ms: Delay between request start and first delta.
        total_duration_ms: Wall time until the terminal state.
        total_tokens: Token count last reported by the backend.
    """

    emitted: int = 0
    received_bytes: int = 0
    time_to_first_chunk_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None
    total_tokens: Optional[int] = None

    def as_log_fields(self) -> Dict[str, Any]:
        """Return the metrics as flat log fields."""
        return {
            "emitted_count": self.emitted,
            "received_bytes": self.received_bytes,
            "time_to_first_chunk_ms": self.time_to_first_chunk_ms,
            "total_duration_ms": self.total_duration_ms,
        }


__all__ = ["StreamMetrics"]
