"""
Result envelope of a streaming call.

A `Payload` is produced exactly once per call. On success it is returned; on
timeout/transport/auth/protocol failures it is attached to the raised error so
the partial text stays available. ``request_body`` is the exact JSON string
that was sent, kept for diagnostic replay.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Payload:
    """Immutable result record.

    Attributes:
        endpoint: URL the request was sent to (secrets redacted).
        model: Model identifier, when the protocol carries one.
        request_body: Serialized JSON request body.
        text: Accumulated text, exactly the concatenation of delivered chunks.
        total_tokens: Token count reported by the backend (0 when unreported).
    """

    endpoint: str
    model: Optional[str]
    request_body: str
    text: str
    total_tokens: int = 0


__all__ = ["Payload"]
