"""
Wire protocol selector.

`Protocol` is the closed set of wire protocol families a `ProviderConfig` can
select. The router maps each member to exactly one streaming client, so adding
a family means adding a member here and a client registration there.
"""
from __future__ import annotations

from enum import Enum


class Protocol(str, Enum):
    """Protocol family of a chat-completion backend."""

    OPENAI = "openai"
    GEMINI = "gemini"
    PLAYER2 = "player2"

    @classmethod
    def parse(cls, value: "Protocol | str") -> "Protocol":
        """Coerce a config string (case-insensitive) into a ``Protocol``."""
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


__all__ = ["Protocol"]
