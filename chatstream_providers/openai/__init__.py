"""OpenAI-style protocol client."""

from .client import OpenAIStreamingClient
from .request_builder import build_request_body, format_endpoint_url

__all__ = ["OpenAIStreamingClient", "build_request_body", "format_endpoint_url"]
