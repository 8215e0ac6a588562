"""Frame translation for Gemini SSE responses.

Text arrives in ``candidates[0].content.parts[*].text``; token usage arrives
in ``usageMetadata.totalTokenCount`` (usually on the last frame). In-band
failures come as ``{"error": {"code": 429, "message": ..., "status": ...}}``.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from ..base.streaming import FrameDelta, error_text


def _first_part_text(frame: Mapping[str, Any]) -> Optional[str]:
    candidates = frame.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    content = candidates[0].get("content") if isinstance(candidates[0], Mapping) else None
    parts = content.get("parts") if isinstance(content, Mapping) else None
    if not isinstance(parts, list):
        return None
    for part in parts:
        if isinstance(part, Mapping) and isinstance(part.get("text"), str):
            return part["text"]
    return None


def _total_tokens(frame: Mapping[str, Any]) -> Optional[int]:
    usage = frame.get("usageMetadata")
    if isinstance(usage, Mapping) and isinstance(usage.get("totalTokenCount"), int):
        return usage["totalTokenCount"]
    return None


def translate_gemini_frame(frame: Mapping[str, Any]) -> FrameDelta:
    """Extract the text delta, token count, or in-band error from one frame."""
    return FrameDelta(
        text=_first_part_text(frame),
        total_tokens=_total_tokens(frame),
        error=error_text(frame.get("error")),
    )


__all__ = ["translate_gemini_frame"]
