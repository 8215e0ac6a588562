"""Protocol router: one streaming client per protocol family.

``ProviderRouter`` maps every ``Protocol`` member to exactly one client in a
closed table built at construction time. Dispatch is a dictionary lookup on
``config.protocol``; there is no runtime type inspection and no registration
API, so the set of supported protocols is fixed by the ``Protocol`` enum.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Dict, Mapping, Optional, Sequence

from ..cancellation import CancellationToken
from ..errors import ConfigurationError
from ..models import Message, Payload, Protocol, ProviderConfig
from ..streaming import BaseStreamingClient, ChunkCallback


def _default_clients() -> Dict[Protocol, BaseStreamingClient]:
    # Protocol packages import from base; resolve them lazily to keep the
    # import graph acyclic.
    from ...gemini import GeminiStreamingClient
    from ...openai import OpenAIStreamingClient
    from ...player2 import Player2StreamingClient

    return {
        Protocol.OPENAI: OpenAIStreamingClient(),
        Protocol.GEMINI: GeminiStreamingClient(),
        Protocol.PLAYER2: Player2StreamingClient(),
    }


class ProviderRouter:
    """Dispatch streaming calls to the client registered for each protocol.

    Example usage:
        router = ProviderRouter()
        payload = await router.stream(config, "Be brief.", [Message.user("hi")], print)

    ``clients`` replaces individual entries of the default table, e.g. to
    inject a Player2 client with a test resolver.
    """

    def __init__(self, clients: Optional[Mapping[Protocol, BaseStreamingClient]] = None) -> None:
        table = _default_clients()
        if clients:
            table.update({Protocol.parse(k): v for k, v in clients.items()})
        self._clients = table

    def client_for(self, protocol: Protocol | str) -> BaseStreamingClient:
        try:
            return self._clients[Protocol.parse(protocol)]
        except (KeyError, ValueError) as exc:
            raise ConfigurationError(f"unsupported protocol: {protocol!r}", str(protocol)) from exc

    async def stream(
        self,
        config: ProviderConfig,
        instruction: str,
        messages: Sequence[Message],
        on_chunk: Optional[ChunkCallback] = None,
        *,
        cancellation: Optional[CancellationToken] = None,
    ) -> Payload:
        """Run one streaming call with the client selected by ``config.protocol``."""
        client = self.client_for(config.protocol)
        return await client.stream(config, instruction, messages, on_chunk, cancellation=cancellation)


_DEFAULT_ROUTER: Optional[ProviderRouter] = None
_LOCK = threading.Lock()


def get_default_router() -> ProviderRouter:
    """Return the lazily created process-wide router."""
    global _DEFAULT_ROUTER  # noqa: PLW0603 - process singleton
    with _LOCK:
        if _DEFAULT_ROUTER is None:
            _DEFAULT_ROUTER = ProviderRouter()
        return _DEFAULT_ROUTER


def reset_default_router() -> None:
    """Drop the process-wide router (tests)."""
    global _DEFAULT_ROUTER  # noqa: PLW0603 - process singleton
    with _LOCK:
        _DEFAULT_ROUTER = None


async def stream_chat_completion(
    config: ProviderConfig,
    instruction: str,
    messages: Sequence[Message],
    on_chunk: Optional[ChunkCallback] = None,
    *,
    cancellation: Optional[CancellationToken] = None,
    router: Optional[ProviderRouter] = None,
) -> Payload:
    """Stream one chat completion, delivering text deltas to ``on_chunk``.

    Returns the ``Payload`` on success. Fails with a ``ProviderError``
    subclass; errors raised after the request was issued carry the partial
    ``Payload`` in ``error.payload``.
    """
    return await (router or get_default_router()).stream(
        config, instruction, messages, on_chunk, cancellation=cancellation
    )


def stream_chat_completion_sync(
    config: ProviderConfig,
    instruction: str,
    messages: Sequence[Message],
    on_chunk: Optional[ChunkCallback] = None,
    *,
    cancellation: Optional[CancellationToken] = None,
    router: Optional[ProviderRouter] = None,
) -> Payload:
    """Blocking wrapper around :func:`stream_chat_completion` (no running loop required)."""
    return asyncio.run(
        stream_chat_completion(
            config, instruction, messages, on_chunk, cancellation=cancellation, router=router
        )
    )


__all__ = [
    "ProviderRouter",
    "get_default_router",
    "reset_default_router",
    "stream_chat_completion",
    "stream_chat_completion_sync",
]
