"""
Streaming Base Package

Exports the protocol-agnostic pieces every protocol client is built from:

- Models: messages, provider configuration, the result ``Payload``
- Errors: the ``ProviderError`` taxonomy and classification helpers
- Timeouts: liveness budgets per protocol and endpoint
- Streaming: chunk parsers, liveness monitor, transport, base client
- Cancellation: cooperative host cancellation token
"""

from .cancellation import CancellationToken
from .errors import (
    AuthError,
    ConfigurationError,
    ConnectTimeoutError,
    ErrorCode,
    ProtocolError,
    ProviderError,
    ReadTimeoutError,
    StreamCancelledError,
    TransportError,
    classify_exception,
)
from .models import Message, Payload, Protocol, ProviderConfig, Role
from .streaming import (
    BaseStreamingClient,
    LivenessMonitor,
    LivenessState,
    PreparedRequest,
    StreamMetrics,
    StreamRequest,
    StreamTransport,
)
from .timeouts import TimeoutConfig, is_local_endpoint, timeout_profile

__all__ = [
    # Models
    "Message",
    "Role",
    "Payload",
    "Protocol",
    "ProviderConfig",
    # Errors
    "ErrorCode",
    "ProviderError",
    "ConfigurationError",
    "ConnectTimeoutError",
    "ReadTimeoutError",
    "TransportError",
    "ProtocolError",
    "AuthError",
    "StreamCancelledError",
    "classify_exception",
    # Timeouts
    "TimeoutConfig",
    "timeout_profile",
    "is_local_endpoint",
    # Streaming
    "BaseStreamingClient",
    "PreparedRequest",
    "LivenessMonitor",
    "LivenessState",
    "StreamMetrics",
    "StreamRequest",
    "StreamTransport",
    # Cancellation
    "CancellationToken",
]
