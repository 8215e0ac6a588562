"""Frame translation for OpenAI-compatible streaming responses.

Each frame looks like ``{"choices": [{"delta": {"content": "..."}}]}``; the
final frame (requested via ``stream_options.include_usage``) carries
``{"usage": {"total_tokens": N}}`` and usually an empty ``choices`` list.
Gateways report failures in-band as ``{"error": {...}}``.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from ..base.streaming import FrameDelta, error_text


def _first_delta_text(frame: Mapping[str, Any]) -> Optional[str]:
    choices = frame.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, Mapping):
        return None
    delta = first.get("delta")
    if not isinstance(delta, Mapping):
        return None
    content = delta.get("content")
    return content if isinstance(content, str) else None


def _total_tokens(frame: Mapping[str, Any]) -> Optional[int]:
    usage = frame.get("usage")
    if isinstance(usage, Mapping) and isinstance(usage.get("total_tokens"), int):
        return usage["total_tokens"]
    return None


def translate_chat_frame(frame: Mapping[str, Any]) -> FrameDelta:
    """Extract the text delta, token count, or in-band error from one frame."""
    return FrameDelta(
        text=_first_delta_text(frame),
        total_tokens=_total_tokens(frame),
        error=error_text(frame.get("error")),
    )


__all__ = ["translate_chat_frame"]
