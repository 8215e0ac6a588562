"""
Player2 request construction (pure, no I/O).

The instruction is sent as the leading ``system`` message. Consecutive turns
that map to the same wire role are merged into one message, joined by a
blank line; the API rejects repeated same-role turns. The server picks the
model, so the body has none.
"""
from __future__ import annotations

from typing import List, Sequence

from ..base.dto import ChatCompletionRequestDTO, ChatMessageDTO, wire_role
from ..base.errors import ConfigurationError
from ..base.models import Message

PROVIDER = "player2"
MERGE_SEPARATOR = "\n\n"


def merge_messages(instruction: str, messages: Sequence[Message]) -> List[ChatMessageDTO]:
    out: List[ChatMessageDTO] = []
    if instruction:
        out.append(ChatMessageDTO(role="system", content=instruction))
    for m in messages:
        role = wire_role(m.role)
        if out and out[-1].role == role:
            out[-1] = ChatMessageDTO(role=role, content=out[-1].content + MERGE_SEPARATOR + m.text)
        else:
            out.append(ChatMessageDTO(role=role, content=m.text))
    return out


def build_request_body(instruction: str, messages: Sequence[Message]) -> str:
    """Serialize ``{"messages": [...], "stream": true}``.

    Raises:
        ConfigurationError: when ``messages`` is empty.
    """
    if not messages:
        raise ConfigurationError("at least one message is required", PROVIDER)
    return ChatCompletionRequestDTO(messages=merge_messages(instruction, messages), stream=True).to_json()


__all__ = ["merge_messages", "build_request_body", "MERGE_SEPARATOR"]
