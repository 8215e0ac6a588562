from __future__ import annotations

import httpx
import pytest

from chatstream_providers import Message, Payload, Protocol, ProviderConfig, ProviderRouter, stream_chat_completion_sync
from chatstream_providers.base.errors import ConfigurationError
from chatstream_providers.base.routing import get_default_router
from chatstream_providers.base.streaming import BaseStreamingClient, FrameDelta, SseChunkParser
from chatstream_providers.gemini import GeminiStreamingClient
from chatstream_providers.openai import OpenAIStreamingClient
from chatstream_providers.player2 import Player2StreamingClient


class _RecordingClient(BaseStreamingClient):
    protocol = Protocol.OPENAI
    parser_class = SseChunkParser

    def __init__(self) -> None:
        super().__init__()
        self.calls = []

    async def prepare(self, config, instruction, messages):
        raise AssertionError("stream is overridden")

    def translate_frame(self, frame):
        return FrameDelta()

    async def stream(self, config, instruction, messages, on_chunk=None, *, cancellation=None):
        self.calls.append((config, instruction, list(messages)))
        if on_chunk:
            on_chunk("stub")
        return Payload(endpoint="stub://", model=config.model, request_body="{}", text="stub")


def test_default_table_covers_every_protocol():
    router = ProviderRouter()
    assert isinstance(router.client_for(Protocol.OPENAI), OpenAIStreamingClient)
    assert isinstance(router.client_for("gemini"), GeminiStreamingClient)
    assert isinstance(router.client_for("PLAYER2"), Player2StreamingClient)
    assert {p for p in Protocol} == {Protocol.OPENAI, Protocol.GEMINI, Protocol.PLAYER2}


def test_unknown_protocol_is_configuration_error():
    with pytest.raises(ConfigurationError):
        ProviderRouter().client_for("anthropic")
    with pytest.raises(ValueError):
        ProviderConfig(protocol="anthropic")


def test_injected_client_replaces_table_entry_and_sync_wrapper():
    fake = _RecordingClient()
    router = ProviderRouter({Protocol.OPENAI: fake})
    got = []
    payload = stream_chat_completion_sync(
        ProviderConfig(protocol="openai", model="m"), "inst", [Message.user("hi")], got.append, router=router
    )
    assert payload.text == "stub"
    assert got == ["stub"]
    assert fake.calls[0][1] == "inst"
    assert isinstance(router.client_for(Protocol.GEMINI), GeminiStreamingClient)


def test_default_router_is_singleton():
    assert get_default_router() is get_default_router()


def test_sync_wrapper_uses_default_router(install_transport):
    install_transport(
        lambda request: httpx.Response(200, content=b'data: {"choices":[{"delta":{"content":"yo"}}]}\n\n')
    )
    cfg = ProviderConfig(protocol="openai", base_url="https://api.openai.com", api_key="k", model="m")
    assert stream_chat_completion_sync(cfg, "", [Message.user("hi")]).text == "yo"


def test_client_missing_protocol_hooks_cannot_be_built():
    class _Incomplete(BaseStreamingClient):
        protocol = Protocol.OPENAI
        parser_class = SseChunkParser

    with pytest.raises(TypeError):
        _Incomplete()
