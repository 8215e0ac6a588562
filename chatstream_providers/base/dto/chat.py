"""
Pydantic DTOs for OpenAI-compatible chat request bodies.

Purpose
-------
Describe the exact JSON shape sent by the OpenAI-style and Player2 request
builders. Serializing through these models (``model_dump_json``) keeps field
names and ordering stable so ``Payload.request_body`` is reproducible.

External dependencies: Pydantic only (no network calls).

Builders check required inputs themselves and raise ``ConfigurationError``;
the field constraints here only guard against programming mistakes.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ..models import Role

WireRole = Literal["system", "user", "assistant"]

_ROLE_MAP = {
    Role.USER: "user",
    Role.ASSISTANT: "assistant",
}


def wire_role(role: Role) -> str:
    """Map a conversation ``Role`` onto its OpenAI-style wire name."""
    return _ROLE_MAP[Role(role)]


class ChatMessageDTO(BaseModel):
    """One wire message: ``{"role": ..., "content": ...}``."""

    role: WireRole
    content: str


class StreamOptionsDTO(BaseModel):
    """Ask the server to append a usage frame to the stream."""

    include_usage: bool = True


class ChatCompletionRequestDTO(BaseModel):
    """Streaming chat-completions request body.

    Parameters:
        model: Target model identifier; omitted by protocols that pick the
            model server-side.
        messages: Ordered wire messages (non-empty).
        stream: Always ``True`` for this library.
        stream_options: Usage reporting request; omitted when ``None``.
    """

    model: Optional[str] = None
    messages: List[ChatMessageDTO] = Field(..., min_length=1)
    stream: bool = True
    stream_options: Optional[StreamOptionsDTO] = None

    def to_json(self) -> str:
        """Serialize to the compact JSON string sent on the wire."""
        return self.model_dump_json(exclude_none=True)


__all__ = [
    "WireRole",
    "wire_role",
    "ChatMessageDTO",
    "StreamOptionsDTO",
    "ChatCompletionRequestDTO",
]
