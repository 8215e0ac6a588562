"""
Message DTO used across streaming clients.

Defines the `Message` dataclass and the `Role` enum. The caller supplies an
ordered sequence of messages; the order is conversation order and every
request builder preserves it on the wire.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    """Author of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """A single conversation turn.

    Attributes:
        role: ``Role.USER`` or ``Role.ASSISTANT``.
        text: Plain text content of the turn.
    """

    role: Role
    text: str

    @classmethod
    def user(cls, text: str) -> "Message":
        return cls(Role.USER, text)

    @classmethod
    def assistant(cls, text: str) -> "Message":
        return cls(Role.ASSISTANT, text)


__all__ = ["Message", "Role"]
