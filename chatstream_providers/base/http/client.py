"""Async HTTP client construction for streaming calls.

Purpose:
    Provide one place that builds ``httpx.AsyncClient`` instances for the
    stream transport and the Player2 local probes. Each streaming call owns
    its client for the lifetime of the call, so no connection state is
    shared between concurrent calls.

External dependencies:
    - ``httpx`` for the underlying asynchronous HTTP client.

Timeout strategy:
    - Only the connect phase is bounded at the socket level (using the
      liveness connect budget). Read timeouts are disabled at the httpx level
      because the liveness monitor owns stall detection.

Testing:
    - ``set_default_transport`` installs an ``httpx.AsyncBaseTransport`` (for
      instance ``httpx.MockTransport``) used by every client created
      afterwards; ``reset_default_transport`` restores real networking.
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

import httpx

ClientFactory = Callable[..., httpx.AsyncClient]

_TRANSPORT: Optional[httpx.AsyncBaseTransport] = None
_LOCK = threading.Lock()


def set_default_transport(transport: Optional[httpx.AsyncBaseTransport]) -> None:
    """Install a transport used by clients created via :func:`create_async_client`."""
    global _TRANSPORT  # noqa: PLW0603 - documented module-level override
    with _LOCK:
        _TRANSPORT = transport


def reset_default_transport() -> None:
    """Drop any transport installed with :func:`set_default_transport`."""
    set_default_transport(None)


def stream_timeout(connect_seconds: float) -> httpx.Timeout:
    """Socket timeouts for a streaming request: bounded connect, unbounded read."""
    return httpx.Timeout(connect=connect_seconds, read=None, write=connect_seconds, pool=connect_seconds)


def create_async_client(*, timeout: httpx.Timeout | float | None = None) -> httpx.AsyncClient:
    """Return a new ``httpx.AsyncClient``; the caller closes it (``async with``)."""
    with _LOCK:
        transport = _TRANSPORT
    if transport is not None:
        return httpx.AsyncClient(timeout=timeout, transport=transport)
    return httpx.AsyncClient(timeout=timeout)


__all__ = [
    "ClientFactory",
    "create_async_client",
    "set_default_transport",
    "reset_default_transport",
    "stream_timeout",
]
