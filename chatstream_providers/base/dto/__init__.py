"""DTO package for wire request bodies."""

from .chat import (
    ChatCompletionRequestDTO,
    ChatMessageDTO,
    StreamOptionsDTO,
    WireRole,
    wire_role,
)

__all__ = [
    "WireRole",
    "wire_role",
    "ChatMessageDTO",
    "StreamOptionsDTO",
    "ChatCompletionRequestDTO",
]
