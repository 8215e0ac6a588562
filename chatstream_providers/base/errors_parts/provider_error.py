"""
Structured streaming error exception types.

`ProviderError` wraps every failure surfaced by a streaming call with a
normalized `ErrorCode`. One subclass exists per code so callers can catch a
specific kind (``except ReadTimeoutError``) or the whole family
(``except ProviderError``).

Errors raised after the request was issued carry the partial `Payload` in
``payload``: the text that was actually delivered through the chunk callback
before the failure.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Optional

from .error_code import ErrorCode

if TYPE_CHECKING:
    from ..models_parts.payload import Payload


@dataclass
class ProviderError(Exception):
    """Represents a structured streaming error with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message suitable for logging.
        provider: Protocol key where the error originated (e.g., ``"gemini"``).
        model: Optional model name associated with the failure.
        status_code: HTTP status when the failure came from a response.
        payload: Partial result envelope, attached once a request was issued.
    """

    code: ErrorCode
    message: str
    provider: str
    model: Optional[str] = None
    status_code: Optional[int] = None
    payload: Optional["Payload"] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Return a compact string combining provider, model, code, and message."""
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"

    @property
    def partial_text(self) -> str:
        """Text streamed before the failure (empty when nothing arrived)."""
        return self.payload.text if self.payload is not None else ""


class _CodedError(ProviderError):
    """``ProviderError`` whose code is fixed by the subclass."""

    kind: ClassVar[ErrorCode]

    def __init__(self, message: str, provider: str, model: Optional[str] = None, **kwargs) -> None:
        super().__init__(self.kind, message, provider, model, **kwargs)


class ConfigurationError(_CodedError):
    """Missing endpoint, key, or model. Raised before any network attempt."""

    kind = ErrorCode.CONFIGURATION


class ConnectTimeoutError(_CodedError):
    """No byte arrived within the connect timeout."""

    kind = ErrorCode.CONNECT_TIMEOUT


class ReadTimeoutError(_CodedError):
    """The stream stalled after it had started receiving."""

    kind = ErrorCode.READ_TIMEOUT


class TransportError(_CodedError):
    """HTTP or connection-level failure."""

    kind = ErrorCode.TRANSPORT


class ProtocolError(_CodedError):
    """Malformed or unexpected frame, or an error reported inside the stream."""

    kind = ErrorCode.PROTOCOL


class AuthError(_CodedError):
    """Authentication rejected by the endpoint."""

    kind = ErrorCode.AUTH


class StreamCancelledError(_CodedError):
    """Host cancellation observed while the stream was in flight."""

    kind = ErrorCode.CANCELLED


ERROR_TYPES = {
    ErrorCode.CONFIGURATION: ConfigurationError,
    ErrorCode.CONNECT_TIMEOUT: ConnectTimeoutError,
    ErrorCode.READ_TIMEOUT: ReadTimeoutError,
    ErrorCode.TRANSPORT: TransportError,
    ErrorCode.PROTOCOL: ProtocolError,
    ErrorCode.AUTH: AuthError,
    ErrorCode.CANCELLED: StreamCancelledError,
}


def error_for(code: ErrorCode, message: str, provider: str, model: Optional[str] = None, **kwargs) -> ProviderError:
    """Instantiate the ``ProviderError`` subclass registered for ``code``."""
    return ERROR_TYPES[code](message, provider, model, **kwargs)


__all__ = [
    "ProviderError",
    "ConfigurationError",
    "ConnectTimeoutError",
    "ReadTimeoutError",
    "TransportError",
    "ProtocolError",
    "AuthError",
    "StreamCancelledError",
    "ERROR_TYPES",
    "error_for",
]
