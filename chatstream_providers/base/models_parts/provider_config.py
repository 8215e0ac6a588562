"""
Per-call provider configuration.

`ProviderConfig` is read-only input owned by the caller's settings layer. It
is immutable for the lifetime of one streaming call.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from .protocol import Protocol


@dataclass(frozen=True)
class ProviderConfig:
    """Endpoint, credentials, and model for one backend.

    Attributes:
        protocol: Wire protocol family used to talk to the backend.
        base_url: Endpoint root. For Player2 this is the remote (hosted) URL
            used when no local app is detected.
        api_key: Bearer/API key. Optional for local OpenAI-style servers; for
            Player2 it is the remote fallback key.
        model: Model identifier (not sent for Player2).
        extra_headers: Additional request headers, e.g. routing headers
            required by some OpenAI-compatible gateways.
    """

    protocol: Protocol
    base_url: str = ""
    api_key: Optional[str] = None
    model: Optional[str] = None
    extra_headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "protocol", Protocol.parse(self.protocol))
        object.__setattr__(self, "extra_headers", MappingProxyType(dict(self.extra_headers or {})))


__all__ = ["ProviderConfig"]
