"""
Gemini request construction (pure, no I/O).

Model-family quirks:

- ``gemma`` models reject ``system_instruction``. The instruction is sent
  as the first user turn instead, prefixed with a random number so identical
  prompts are not answered from the provider's response cache.
- ``flash`` models get ``thinking_budget = 0`` so they answer directly
  instead of spending time on hidden reasoning.

Both checks are case-insensitive substring matches on the model name.
"""
from __future__ import annotations

import random
from typing import Callable, List, Optional, Sequence
from urllib.parse import quote

from ..base.errors import ConfigurationError
from ..base.models import Message, Role
from .dto import (
    ContentDTO,
    GenerateContentRequestDTO,
    GenerationConfigDTO,
    PartDTO,
    SystemInstructionDTO,
    ThinkingConfigDTO,
)

PROVIDER = "gemini"
REDACTED = "***"

NonceSource = Callable[[], int]

_ROLE_MAP = {
    Role.USER: "user",
    Role.ASSISTANT: "model",
}


def random_nonce() -> int:
    """Non-negative 31-bit random integer."""
    return random.randint(0, 2**31 - 1)


def is_gemma(model: str) -> bool:
    return "gemma" in model.lower()


def is_flash(model: str) -> bool:
    return "flash" in model.lower()


def stream_url(base_url: Optional[str], model: str, api_key: str) -> str:
    """``{base}/models/{model}:streamGenerateContent?alt=sse&key={api_key}``."""
    base = (base_url or "").strip().rstrip("/")
    if not base:
        raise ConfigurationError("Gemini base URL is not configured", PROVIDER, model)
    return f"{base}/models/{quote(model, safe='-._~')}:streamGenerateContent?alt=sse&key={api_key}"


def redacted_url(base_url: Optional[str], model: str) -> str:
    """The stream URL with the key replaced, safe for logs and ``Payload``."""
    return stream_url(base_url, model, REDACTED)


def build_contents(
    instruction: str,
    messages: Sequence[Message],
    model: str,
    nonce_source: NonceSource = random_nonce,
) -> tuple[Optional[SystemInstructionDTO], List[ContentDTO]]:
    system: Optional[SystemInstructionDTO] = None
    contents: List[ContentDTO] = []
    if instruction:
        if is_gemma(model):
            contents.append(ContentDTO(role="user", parts=[PartDTO(text=f"{nonce_source()} {instruction}")]))
        else:
            system = SystemInstructionDTO(parts=[PartDTO(text=instruction)])
    contents.extend(ContentDTO(role=_ROLE_MAP[Role(m.role)], parts=[PartDTO(text=m.text)]) for m in messages)
    return system, contents


def build_request_body(
    instruction: str,
    messages: Sequence[Message],
    model: Optional[str],
    *,
    nonce_source: NonceSource = random_nonce,
) -> str:
    """Serialize the ``streamGenerateContent`` body.

    Raises:
        ConfigurationError: when ``model`` is empty or ``messages`` is empty.
    """
    if not model or not model.strip():
        raise ConfigurationError("Gemini model is not configured", PROVIDER)
    if not messages:
        raise ConfigurationError("at least one message is required", PROVIDER, model)
    system, contents = build_contents(instruction, messages, model, nonce_source)
    generation = GenerationConfigDTO()
    if is_flash(model):
        generation.thinking_config = ThinkingConfigDTO(thinking_budget=0)
    dto = GenerateContentRequestDTO(
        system_instruction=system,
        contents=contents,
        generation_config=generation,
    )
    return dto.to_json()


__all__ = [
    "NonceSource",
    "random_nonce",
    "is_gemma",
    "is_flash",
    "stream_url",
    "redacted_url",
    "build_contents",
    "build_request_body",
]
