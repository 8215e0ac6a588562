"""
OpenAI-style request construction (pure, no I/O).

- ``format_endpoint_url`` normalizes a configured base URL into the
  chat-completions endpoint.
- ``build_request_body`` turns an instruction and ordered messages into the
  streaming JSON body: the instruction becomes a leading ``system`` message
  when non-empty, every message keeps its position, and usage reporting is
  requested so the final frame carries a token count.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

import httpx

from ..base.dto import ChatCompletionRequestDTO, ChatMessageDTO, StreamOptionsDTO, wire_role
from ..base.errors import ConfigurationError
from ..base.models import Message

PROVIDER = "openai"
CHAT_COMPLETIONS_PATH = "/v1/chat/completions"


def format_endpoint_url(base_url: Optional[str]) -> str:
    """Return the chat-completions URL for ``base_url``.

    Surrounding whitespace and trailing slashes are dropped. The default path
    is appended only when the URL carries no path of its own, so gateway URLs
    such as ``https://host/api/v1/chat/completions`` pass through untouched.

    Raises:
        ConfigurationError: when the URL is empty or not absolute.
    """
    url = (base_url or "").strip().rstrip("/")
    if not url:
        raise ConfigurationError("OpenAI base URL is not configured", PROVIDER)
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise ConfigurationError(f"invalid OpenAI base URL: {url}", PROVIDER) from exc
    if not parsed.scheme or not parsed.host:
        raise ConfigurationError(f"invalid OpenAI base URL: {url}", PROVIDER)
    if parsed.path in ("", "/"):
        return url + CHAT_COMPLETIONS_PATH
    return url


def build_messages(instruction: str, messages: Sequence[Message]) -> List[ChatMessageDTO]:
    out: List[ChatMessageDTO] = []
    if instruction:
        out.append(ChatMessageDTO(role="system", content=instruction))
    out.extend(ChatMessageDTO(role=wire_role(m.role), content=m.text) for m in messages)
    return out


def build_request_body(instruction: str, messages: Sequence[Message], model: Optional[str]) -> str:
    """Serialize the streaming request body.

    Raises:
        ConfigurationError: when ``model`` is empty or ``messages`` is empty.
    """
    if not model or not model.strip():
        raise ConfigurationError("OpenAI model is not configured", PROVIDER)
    if not messages:
        raise ConfigurationError("at least one message is required", PROVIDER, model)
    dto = ChatCompletionRequestDTO(
        model=model,
        messages=build_messages(instruction, messages),
        stream=True,
        stream_options=StreamOptionsDTO(include_usage=True),
    )
    return dto.to_json()


__all__ = ["format_endpoint_url", "build_messages", "build_request_body", "CHAT_COMPLETIONS_PATH"]
