"""
Error classification helpers mapping exceptions to normalized ErrorCode values.

Implements HTTP status extraction, status-to-code mapping, httpx exception
mapping, and message-based heuristics for errors reported inside a stream
body (which carry no status code).
"""
from __future__ import annotations

import asyncio
from typing import Dict, Optional

import httpx

from .error_code import ErrorCode
from .provider_error import ProviderError


def _extract_status(exc: BaseException) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    val = getattr(exc, "status_code", None)
    if isinstance(val, int) and 100 <= val < 600:
        return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
}

_AUTH_PATTERNS = ("auth", "401", "403", "unauthorized", "forbidden", "api key")


def is_auth_message(msg: str | None) -> bool:
    """Return True when an error text looks like an authentication failure."""
    if not msg:
        return False
    lowered = msg.lower()
    return any(p in lowered for p in _AUTH_PATTERNS)


def status_to_code(status: int) -> ErrorCode:
    """Map an HTTP error status onto an :class:`ErrorCode`."""
    return _HTTP_STATUS_MAP.get(status, ErrorCode.TRANSPORT)


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. ProviderError passthrough.
        2. httpx connect and pool timeouts (no byte was ever received).
        3. httpx read timeouts. Write and generic timeouts are ``TRANSPORT``.
        4. HTTP status mapping.
        5. Transport-level httpx failures.
        6. Message heuristics (auth), then ``TRANSPORT`` fallback.
    """
    if isinstance(exc, ProviderError):
        return exc.code
    if isinstance(exc, (httpx.ConnectTimeout, httpx.PoolTimeout)):
        return ErrorCode.CONNECT_TIMEOUT
    if isinstance(exc, httpx.ReadTimeout):
        return ErrorCode.READ_TIMEOUT
    if isinstance(exc, (httpx.TimeoutException, TimeoutError, asyncio.TimeoutError)):
        return ErrorCode.TRANSPORT
    status = _extract_status(exc)
    if status is not None and status >= 400:
        return status_to_code(status)
    if isinstance(exc, (httpx.TransportError, httpx.HTTPStatusError)):
        return ErrorCode.TRANSPORT
    if isinstance(exc, httpx.DecodingError):
        return ErrorCode.PROTOCOL
    return ErrorCode.AUTH if is_auth_message(str(exc)) else ErrorCode.TRANSPORT


__all__ = [
    "classify_exception",
    "is_auth_message",
    "status_to_code",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
