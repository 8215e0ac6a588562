"""
Normalized streaming error codes (taxonomy).

Defines the `ErrorCode` enumeration used across streaming clients and error
handling utilities. Values are lowercase snake_case and are considered a stable
public contract for logging and analytics.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    CONFIGURATION = "configuration"
    CONNECT_TIMEOUT = "connect_timeout"
    READ_TIMEOUT = "read_timeout"
    TRANSPORT = "transport"
    PROTOCOL = "protocol"
    AUTH = "auth"
    CANCELLED = "cancelled"


__all__ = ["ErrorCode"]
