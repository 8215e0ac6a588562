"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `chatstream_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import (
    AuthError,
    ConfigurationError,
    ConnectTimeoutError,
    ProtocolError,
    ProviderError,
    ReadTimeoutError,
    StreamCancelledError,
    TransportError,
    error_for,
)
from .classification import classify_exception, is_auth_message

__all__ = [
    "ErrorCode",
    "ProviderError",
    "ConfigurationError",
    "ConnectTimeoutError",
    "ReadTimeoutError",
    "TransportError",
    "ProtocolError",
    "AuthError",
    "StreamCancelledError",
    "error_for",
    "classify_exception",
    "is_auth_message",
]
