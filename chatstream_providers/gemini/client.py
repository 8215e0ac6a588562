"""Gemini streaming client (``streamGenerateContent`` with ``alt=sse``).

The API key travels as the ``key`` query parameter; logs and the returned
``Payload`` only ever see the redacted URL.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..base.errors import ConfigurationError
from ..base.models import Message, Protocol, ProviderConfig
from ..base.streaming import (
    BaseStreamingClient,
    FrameDelta,
    PreparedRequest,
    SseChunkParser,
    StreamRequest,
    StreamTransport,
    json_headers,
)
from ..base.timeouts import timeout_profile
from .request_builder import NonceSource, build_request_body, random_nonce, redacted_url, stream_url
from .stream_helpers import translate_gemini_frame


class GeminiStreamingClient(BaseStreamingClient):
    """Streaming client for the Gemini generative language API."""

    protocol = Protocol.GEMINI
    parser_class = SseChunkParser

    def __init__(
        self,
        *,
        transport: Optional[StreamTransport] = None,
        nonce_source: NonceSource = random_nonce,
        **kwargs: Any,
    ) -> None:
        super().__init__(transport=transport, **kwargs)
        self._nonce_source = nonce_source

    async def prepare(
        self,
        config: ProviderConfig,
        instruction: str,
        messages: Sequence[Message],
    ) -> PreparedRequest:
        body = build_request_body(instruction, messages, config.model, nonce_source=self._nonce_source)
        model = config.model or ""
        if not config.api_key:
            raise ConfigurationError("Gemini API key is not configured", self.provider_name, model)
        url = stream_url(config.base_url, model, config.api_key)
        endpoint = redacted_url(config.base_url, model)
        return PreparedRequest(
            request=StreamRequest(url=url, body=body, headers=json_headers(extra=config.extra_headers)),
            endpoint=endpoint,
            model=model,
            timeouts=timeout_profile(self.protocol, endpoint),
        )

    def translate_frame(self, frame: Mapping[str, Any]) -> FrameDelta:
        return translate_gemini_frame(frame)


__all__ = ["GeminiStreamingClient"]
