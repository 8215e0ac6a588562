"""HTTP utilities package for streaming clients.

Exposes the async client factory.
"""

from .client import (
    ClientFactory,
    create_async_client,
    reset_default_transport,
    set_default_transport,
    stream_timeout,
)

__all__ = [
    "ClientFactory",
    "create_async_client",
    "set_default_transport",
    "reset_default_transport",
    "stream_timeout",
]
