"""Unified liveness timeout configuration for streaming clients.

Every streaming call is watched by a liveness monitor that polls byte
progress at a fixed interval. Two budgets apply:

connect timeout
    How long the call may stay silent before the *first* byte arrives.
    Locally hosted inference servers cold-start slowly, so local endpoints
    get a budget measured in minutes.
read timeout
    How long a stream that already started may stall between bytes.

Key Components
--------------
TimeoutConfig
    Frozen dataclass with the connect/read budgets and the poll interval.

timeout_profile(protocol, endpoint)
    Per-protocol defaults (OpenAI-style remote 60/60, local 300/60; Gemini
    30/30; Player2 60/60) with optional environment overrides:
        CHATSTREAM_CONNECT_TIMEOUT_SECONDS
        CHATSTREAM_READ_TIMEOUT_SECONDS
        CHATSTREAM_POLL_INTERVAL_SECONDS

is_local_endpoint(url)
    Host-based detection of loopback, private-range, and ``.local`` endpoints.
"""
from __future__ import annotations

import ipaddress
import os
from dataclasses import dataclass, replace
from typing import Dict, Optional

import httpx

from .models_parts.protocol import Protocol

POLL_INTERVAL_SECONDS = 0.1
LOCAL_HEALTH_TIMEOUT_SECONDS = 2.0
LOCAL_LOGIN_TIMEOUT_SECONDS = 3.0


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for liveness timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Longest silence allowed before the first byte.
        read_timeout_seconds: Longest stall allowed once bytes are flowing.
        poll_interval_seconds: Liveness poll period.
    """

    connect_timeout_seconds: float = 60.0
    read_timeout_seconds: float = 60.0
    poll_interval_seconds: float = POLL_INTERVAL_SECONDS


_REMOTE_PROFILES: Dict[Protocol, TimeoutConfig] = {
    Protocol.OPENAI: TimeoutConfig(60.0, 60.0),
    Protocol.GEMINI: TimeoutConfig(30.0, 30.0),
    Protocol.PLAYER2: TimeoutConfig(60.0, 60.0),
}

# Local overrides apply only where the protocol talks to an inference server.
_LOCAL_PROFILES: Dict[Protocol, TimeoutConfig] = {
    Protocol.OPENAI: TimeoutConfig(300.0, 60.0),
}


def _parse_env_float(name: str) -> Optional[float]:
    """Return a positive float from env var ``name`` or ``None``."""
    raw = os.getenv(name)
    if not raw:
        return None
    try:
        val = float(raw)
    except ValueError:
        return None
    return val if val > 0 else None


def is_local_endpoint(url: str) -> bool:
    """Return True when ``url`` points at this machine or the local network."""
    try:
        host = httpx.URL(url.strip()).host
    except (httpx.InvalidURL, TypeError):
        return False
    if not host:
        return False
    host = host.lower()
    if host == "localhost" or host.endswith(".localhost") or host.endswith(".local"):
        return True
    try:
        addr = ipaddress.ip_address(host)
    except ValueError:
        return False
    return addr.is_loopback or addr.is_private or addr.is_link_local


def timeout_profile(protocol: Protocol, endpoint: str | None = None) -> TimeoutConfig:
    """Return the liveness budgets for ``protocol`` talking to ``endpoint``.

    Environment overrides win over the built-in profile.
    """
    cfg = _REMOTE_PROFILES[protocol]
    if endpoint and is_local_endpoint(endpoint):
        cfg = _LOCAL_PROFILES.get(protocol, cfg)
    overrides = {
        "connect_timeout_seconds": _parse_env_float("CHATSTREAM_CONNECT_TIMEOUT_SECONDS"),
        "read_timeout_seconds": _parse_env_float("CHATSTREAM_READ_TIMEOUT_SECONDS"),
        "poll_interval_seconds": _parse_env_float("CHATSTREAM_POLL_INTERVAL_SECONDS"),
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    return replace(cfg, **overrides) if overrides else cfg


__all__ = [
    "TimeoutConfig",
    "timeout_profile",
    "is_local_endpoint",
    "POLL_INTERVAL_SECONDS",
    "LOCAL_HEALTH_TIMEOUT_SECONDS",
    "LOCAL_LOGIN_TIMEOUT_SECONDS",
]
