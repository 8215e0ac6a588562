"""Unified streaming error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``chatstream_providers.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import (
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
from .errors_parts.classification import classify_exception, is_auth_message

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
