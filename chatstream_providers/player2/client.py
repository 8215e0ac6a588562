"""Player2 streaming client (NDJSON chat completions).

Connection details come from ``Player2AuthResolver`` on every call. When a
call that used the local app's key fails at the transport level or is
rejected as unauthenticated, the cached key is dropped so the next call
probes the app again instead of reusing a dead credential.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..base.errors import ErrorCode, ProviderError
from ..base.models import Message, Protocol, ProviderConfig
from ..base.streaming import (
    BaseStreamingClient,
    FrameDelta,
    NdjsonChunkParser,
    PreparedRequest,
    StreamRequest,
    StreamTransport,
    json_headers,
)
from ..base.timeouts import timeout_profile
from ..config.defaults import PLAYER2_DEFAULT_BASE_URL, PLAYER2_GAME_CLIENT_ID, PLAYER2_GAME_KEY_HEADER
from ..openai.stream_helpers import translate_chat_frame
from .auth import Player2AuthResolver
from .request_builder import build_request_body

CHAT_COMPLETIONS_PATH = "/v1/chat/completions"

_INVALIDATING_CODES = frozenset({ErrorCode.TRANSPORT, ErrorCode.AUTH})


class Player2StreamingClient(BaseStreamingClient):
    """Streaming client for Player2 (local app or hosted API)."""

    protocol = Protocol.PLAYER2
    parser_class = NdjsonChunkParser

    def __init__(
        self,
        *,
        transport: Optional[StreamTransport] = None,
        resolver: Optional[Player2AuthResolver] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(transport=transport, **kwargs)
        self.resolver = resolver or Player2AuthResolver()

    async def prepare(
        self,
        config: ProviderConfig,
        instruction: str,
        messages: Sequence[Message],
    ) -> PreparedRequest:
        body = build_request_body(instruction, messages)
        remote = (config.base_url or PLAYER2_DEFAULT_BASE_URL).strip().rstrip("/")
        conn = await self.resolver.resolve(remote, config.api_key)
        url = f"{conn.base_url.rstrip('/')}{CHAT_COMPLETIONS_PATH}"
        headers = json_headers(conn.api_key, config.extra_headers)
        headers[PLAYER2_GAME_KEY_HEADER] = PLAYER2_GAME_CLIENT_ID
        return PreparedRequest(
            request=StreamRequest(url=url, body=body, headers=headers),
            endpoint=url,
            model=None,
            timeouts=timeout_profile(self.protocol, url),
            context={"connection": "local" if conn.is_local else "remote"},
        )

    def translate_frame(self, frame: Mapping[str, Any]) -> FrameDelta:
        return translate_chat_frame(frame)

    def on_stream_failure(self, prepared: PreparedRequest, error: ProviderError) -> None:
        if prepared.context.get("connection") == "local" and error.code in _INVALIDATING_CODES:
            self.resolver.invalidate(reason=error.code.value)


__all__ = ["Player2StreamingClient"]
