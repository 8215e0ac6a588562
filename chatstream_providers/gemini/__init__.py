"""Gemini protocol client."""

from .client import GeminiStreamingClient
from .request_builder import build_request_body, redacted_url, stream_url

__all__ = ["GeminiStreamingClient", "build_request_body", "stream_url", "redacted_url"]
