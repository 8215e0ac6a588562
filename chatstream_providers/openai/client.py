"""OpenAI-style streaming client.

Talks to any server implementing ``POST /v1/chat/completions`` with SSE
streaming (OpenAI, OpenRouter, LM Studio, llama.cpp, vLLM, Ollama's
compatibility layer...). Local endpoints get the long connect budget to
absorb model cold starts.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from ..base.models import Message, Protocol, ProviderConfig
from ..base.streaming import (
    BaseStreamingClient,
    FrameDelta,
    PreparedRequest,
    SseChunkParser,
    StreamRequest,
    json_headers,
)
from ..base.timeouts import timeout_profile
from .request_builder import build_request_body, format_endpoint_url
from .stream_helpers import translate_chat_frame


class OpenAIStreamingClient(BaseStreamingClient):
    """Streaming client for OpenAI-compatible chat completions."""

    protocol = Protocol.OPENAI
    parser_class = SseChunkParser

    async def prepare(
        self,
        config: ProviderConfig,
        instruction: str,
        messages: Sequence[Message],
    ) -> PreparedRequest:
        url = format_endpoint_url(config.base_url)
        body = build_request_body(instruction, messages, config.model)
        return PreparedRequest(
            request=StreamRequest(url=url, body=body, headers=json_headers(config.api_key, config.extra_headers)),
            endpoint=url,
            model=config.model,
            timeouts=timeout_profile(self.protocol, url),
        )

    def translate_frame(self, frame: Mapping[str, Any]) -> FrameDelta:
        return translate_chat_frame(frame)


__all__ = ["OpenAIStreamingClient"]
