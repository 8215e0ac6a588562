"""End-to-end protocol clients over ``httpx.MockTransport``."""
from __future__ import annotations

import asyncio
import json
import logging

import httpx
import pytest

from chatstream_providers import (
    AuthError,
    CancellationToken,
    ConfigurationError,
    Message,
    Protocol,
    ProviderConfig,
    ProviderRouter,
    ReadTimeoutError,
    StreamCancelledError,
    TransportError,
    stream_chat_completion,
)
from chatstream_providers.player2 import get_default_auth_cache

MESSAGES = [Message.user("Where is the caravan?")]


def _openai_sse(*pieces: str, total: int | None = None) -> bytes:
    out = b"".join(
        f"data: {json.dumps({'choices': [{'delta': {'content': p}}]})}\n\n".encode("utf-8") for p in pieces
    )
    if total is not None:
        out += f"data: {json.dumps({'choices': [], 'usage': {'total_tokens': total}})}\n\n".encode("utf-8")
    return out + b"data: [DONE]\n\n"


def _ndjson(*pieces: str) -> bytes:
    return b"".join(
        json.dumps({"choices": [{"delta": {"content": p}}]}).encode("utf-8") + b"\n" for p in pieces
    )


def _fast_timeouts(monkeypatch):
    monkeypatch.setenv("CHATSTREAM_CONNECT_TIMEOUT_SECONDS", "0.3")
    monkeypatch.setenv("CHATSTREAM_READ_TIMEOUT_SECONDS", "0.3")
    monkeypatch.setenv("CHATSTREAM_POLL_INTERVAL_SECONDS", "0.01")


# -- OpenAI-style ------------------------------------------------------------


def test_openai_success_payload_and_logging(install_transport, events):
    sent = []

    def handler(request):
        sent.append(request)
        return httpx.Response(200, content=_openai_sse("North", " of", " the river.", total=21))

    install_transport(handler)
    cfg = ProviderConfig(
        protocol="openai",
        base_url="https://api.openai.com/",
        api_key="sk-secret",
        model="gpt-4o-mini",
        extra_headers={"X-Title": "quests"},
    )
    got = []
    payload = asyncio.run(stream_chat_completion(cfg, "Answer in one line.", MESSAGES, got.append))

    assert got == ["North", " of", " the river."]
    assert payload.text == "North of the river."
    assert payload.total_tokens == 21
    assert payload.endpoint == "https://api.openai.com/v1/chat/completions"
    assert payload.model == "gpt-4o-mini"
    (request,) = sent
    assert str(request.url) == payload.endpoint
    assert request.content.decode("utf-8") == payload.request_body
    assert request.headers["authorization"] == "Bearer sk-secret"
    assert request.headers["x-title"] == "quests"

    names = [e["event"] for e in events.events]
    assert "stream.start" in names and "stream.end" in names
    (end,) = events.named("stream.end")
    assert end["emitted"] == 3 and end["tokens"] == 21
    assert all("sk-secret" not in r.getMessage() for r in events.records)


def test_openai_local_endpoint_without_key_uses_long_connect_budget(install_transport, events):
    sent = []

    def handler(request):
        sent.append(request)
        return httpx.Response(200, content=_openai_sse("ok"))

    install_transport(handler)
    cfg = ProviderConfig(protocol=Protocol.OPENAI, base_url="http://localhost:1234", model="local-model")
    payload = asyncio.run(stream_chat_completion(cfg, "", MESSAGES))
    assert payload.text == "ok"
    assert "authorization" not in sent[0].headers
    (start,) = events.named("stream.start")
    assert start["connect_timeout_s"] == 300.0
    assert start["read_timeout_s"] == 60.0


def test_openai_missing_model_fails_before_network(install_transport):
    calls = []
    install_transport(lambda request: calls.append(request) or httpx.Response(200))
    cfg = ProviderConfig(protocol=Protocol.OPENAI, base_url="https://api.openai.com", api_key="k")
    with pytest.raises(ConfigurationError):
        asyncio.run(stream_chat_completion(cfg, "i", MESSAGES))
    assert calls == []


def test_read_timeout_error_carries_partial_payload(install_transport, monkeypatch):
    _fast_timeouts(monkeypatch)

    async def body():
        yield _openai_sse("Once upon").replace(b"data: [DONE]\n\n", b"")
        await asyncio.sleep(30)

    install_transport(lambda request: httpx.Response(200, content=body()))
    cfg = ProviderConfig(protocol=Protocol.OPENAI, base_url="https://api.openai.com", api_key="k", model="m")
    got = []
    with pytest.raises(ReadTimeoutError) as info:
        asyncio.run(stream_chat_completion(cfg, "i", MESSAGES, got.append))
    assert got == ["Once upon"]
    assert info.value.payload is not None
    assert info.value.payload.text == "Once upon"
    assert info.value.partial_text == "Once upon"
    assert info.value.payload.request_body


def test_cancellation_raises_and_logs_quietly(install_transport, monkeypatch, events):
    _fast_timeouts(monkeypatch)
    state = {"loaded": True}

    async def body():
        yield _openai_sse("partial").replace(b"data: [DONE]\n\n", b"")
        state["loaded"] = False
        await asyncio.sleep(30)

    install_transport(lambda request: httpx.Response(200, content=body()))
    token = CancellationToken.from_callable(lambda: not state["loaded"])
    cfg = ProviderConfig(protocol=Protocol.OPENAI, base_url="https://api.openai.com", api_key="k", model="m")
    with pytest.raises(StreamCancelledError) as info:
        asyncio.run(stream_chat_completion(cfg, "i", MESSAGES, cancellation=token))
    assert info.value.partial_text == "partial"
    (cancelled,) = events.named("stream.cancelled")
    assert cancelled["error_code"] == "cancelled"
    assert not events.named("stream.error")
    assert all(r.levelname == "DEBUG" for r in events.records if "stream.cancelled" in r.getMessage())


def test_concurrent_calls_on_one_router_keep_their_own_text(install_transport, monkeypatch):
    _fast_timeouts(monkeypatch)
    order = []

    async def main():
        a_sent, b_sent = asyncio.Event(), asyncio.Event()

        async def body_a():
            yield _openai_sse("a1").replace(b"data: [DONE]\n\n", b"")
            a_sent.set()
            await b_sent.wait()
            yield _openai_sse("a2")

        async def body_b():
            await a_sent.wait()
            yield _openai_sse("b1").replace(b"data: [DONE]\n\n", b"")
            b_sent.set()
            yield _openai_sse("b2")

        def handler(request):
            model = json.loads(request.content)["model"]
            return httpx.Response(200, content=body_a() if model == "model-a" else body_b())

        install_transport(handler)
        router = ProviderRouter()
        got_a, got_b = [], []

        def on_a(text):
            got_a.append(text)
            order.append(text)

        def on_b(text):
            got_b.append(text)
            order.append(text)

        base = {"protocol": Protocol.OPENAI, "base_url": "https://api.openai.com", "api_key": "k"}
        payloads = await asyncio.gather(
            stream_chat_completion(ProviderConfig(model="model-a", **base), "", MESSAGES, on_a, router=router),
            stream_chat_completion(ProviderConfig(model="model-b", **base), "", MESSAGES, on_b, router=router),
        )
        return payloads, got_a, got_b

    (payload_a, payload_b), got_a, got_b = asyncio.run(main())

    assert order.index("b1") < order.index("a2")
    assert got_a == ["a1", "a2"] and payload_a.text == "a1a2"
    assert got_b == ["b1", "b2"] and payload_b.text == "b1b2"
    assert payload_a.model == "model-a" and payload_b.model == "model-b"


# -- Gemini ------------------------------------------------------------------


def test_gemini_stream_redacts_key(install_transport, events):
    sent = []

    def handler(request):
        sent.append(request)
        frames = [
            {"candidates": [{"content": {"role": "model", "parts": [{"text": "Bandits"}]}}]},
            {
                "candidates": [{"content": {"role": "model", "parts": [{"text": " attack."}]}}],
                "usageMetadata": {"totalTokenCount": 11},
            },
        ]
        body = b"".join(f"data: {json.dumps(f)}\r\n\r\n".encode("utf-8") for f in frames)
        return httpx.Response(200, content=body)

    install_transport(handler)
    cfg = ProviderConfig(
        protocol=Protocol.GEMINI,
        base_url="https://generativelanguage.googleapis.com/v1beta",
        api_key="AIza-secret",
        model="gemini-2.5-flash",
    )
    payload = asyncio.run(stream_chat_completion(cfg, "Narrate.", MESSAGES))
    assert payload.text == "Bandits attack."
    assert payload.total_tokens == 11
    assert "AIza-secret" not in payload.endpoint
    assert payload.endpoint.endswith(":streamGenerateContent?alt=sse&key=***")
    assert sent[0].url.params["key"] == "AIza-secret"
    assert sent[0].url.params["alt"] == "sse"
    assert "authorization" not in sent[0].headers
    assert all("AIza-secret" not in r.getMessage() for r in events.records)


def test_gemini_requires_api_key(install_transport):
    calls = []
    install_transport(lambda request: calls.append(request) or httpx.Response(200))
    cfg = ProviderConfig(protocol=Protocol.GEMINI, base_url="https://g.test/v1beta", model="gemini-2.5-pro")
    with pytest.raises(ConfigurationError):
        asyncio.run(stream_chat_completion(cfg, "i", MESSAGES))
    assert calls == []


# -- Player2 -----------------------------------------------------------------


class Player2World:
    """Mock local app plus hosted API in one handler."""

    def __init__(self, *, local_up: bool = True, chat_status: int = 200) -> None:
        self.local_up = local_up
        self.chat_status = chat_status
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.url.host == "localhost" and not self.local_up:
            raise httpx.ConnectError("refused", request=request)
        if path == "/v1/health":
            return httpx.Response(200, json={})
        if path.startswith("/v1/login/web/"):
            return httpx.Response(200, json={"p2Key": "p2-local"})
        if path == "/v1/chat/completions":
            if self.chat_status != 200:
                return httpx.Response(self.chat_status, json={"error": "unauthorized"})
            return httpx.Response(200, content=_ndjson("Hi", " traveler"))
        return httpx.Response(404)

    def paths(self):
        return [(r.url.host, r.url.path) for r in self.requests]


def test_player2_local_flow_sets_headers(install_transport):
    world = Player2World()
    install_transport(world)
    cfg = ProviderConfig(protocol=Protocol.PLAYER2, base_url="https://api.player2.game", api_key="remote")
    payload = asyncio.run(stream_chat_completion(cfg, "Greet.", [Message.user("a"), Message.user("b")]))

    assert payload.text == "Hi traveler"
    assert payload.model is None
    assert payload.endpoint == "http://localhost:4315/v1/chat/completions"
    chat = world.requests[-1]
    assert chat.headers["authorization"] == "Bearer p2-local"
    assert chat.headers["player2-game-key"] == "019a8368-b00b-72bc-b367-2825079dc6fb"
    assert json.loads(chat.content)["messages"] == [
        {"role": "system", "content": "Greet."},
        {"role": "user", "content": "a\n\nb"},
    ]

    # Second call reuses the cached key: only the chat request goes out.
    world.requests.clear()
    asyncio.run(stream_chat_completion(cfg, "Greet.", MESSAGES))
    assert world.paths() == [("localhost", "/v1/chat/completions")]


def test_player2_auth_failure_invalidates_cache(install_transport):
    world = Player2World(chat_status=401)
    install_transport(world)
    cfg = ProviderConfig(protocol=Protocol.PLAYER2, api_key="remote")
    with pytest.raises(AuthError):
        asyncio.run(stream_chat_completion(cfg, "", MESSAGES))
    assert get_default_auth_cache().get() is None

    world.chat_status = 200
    world.requests.clear()
    asyncio.run(stream_chat_completion(cfg, "", MESSAGES))
    assert world.paths()[0] == ("localhost", "/v1/health")


def test_player2_remote_fallback_failure_keeps_cache_untouched(install_transport, events):
    world = Player2World(local_up=False, chat_status=500)
    install_transport(world)
    cfg = ProviderConfig(protocol=Protocol.PLAYER2, base_url="https://api.player2.game/", api_key="remote")
    with pytest.raises(TransportError) as info:
        asyncio.run(stream_chat_completion(cfg, "", MESSAGES))
    assert info.value.payload.endpoint == "https://api.player2.game/v1/chat/completions"
    assert world.requests[-1].headers["authorization"] == "Bearer remote"
    assert not events.named("auth.cache.invalidated")


def test_player2_without_local_app_or_key(install_transport):
    world = Player2World(local_up=False)
    install_transport(world)
    cfg = ProviderConfig(protocol=Protocol.PLAYER2)
    with pytest.raises(ConfigurationError):
        asyncio.run(stream_chat_completion(cfg, "", MESSAGES))
    assert world.paths() == [("localhost", "/v1/health")]


def test_raw_response_logged_only_at_debug(install_transport, monkeypatch, events):
    install_transport(lambda request: httpx.Response(200, content=_openai_sse("raw", " body")))
    cfg = ProviderConfig(protocol=Protocol.OPENAI, base_url="https://api.openai.com", api_key="k", model="m")
    asyncio.run(stream_chat_completion(cfg, "", MESSAGES))
    (response,) = events.named("stream.response")
    assert '"raw"' in response["raw"]

    monkeypatch.setenv("CHATSTREAM_LOG_LEVEL", "INFO")
    logging.getLogger("chatstream").setLevel(logging.INFO)
    payload = asyncio.run(stream_chat_completion(cfg, "", MESSAGES))
    assert payload.text == "raw body"
    assert len(events.named("stream.response")) == 1
