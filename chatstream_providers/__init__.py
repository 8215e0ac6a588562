"""chatstream_providers package

Streaming chat-completion client for OpenAI-compatible, Gemini, and Player2
backends behind one contract.

Public API (re-exported):
    - Version: ``__version__``
    - Entry points: :func:`stream_chat_completion`,
      :func:`stream_chat_completion_sync`, :class:`ProviderRouter`
    - Models: :class:`Message`, :class:`Role`, :class:`ProviderConfig`,
      :class:`Payload`, :class:`Protocol`
    - Errors: :class:`ProviderError` and one subclass per :class:`ErrorCode`
    - Cancellation: :class:`CancellationToken`
    - Configuration: :func:`get_provider_config`

Example:
    config = get_provider_config("openai", {"model": "gpt-4o-mini"})
    payload = stream_chat_completion_sync(
        config, "Answer briefly.", [Message.user("Hello")], on_chunk=print
    )
"""

from .base.cancellation import CancellationToken
from .base.errors import (
    AuthError,
    ConfigurationError,
    ConnectTimeoutError,
    ErrorCode,
    ProtocolError,
    ProviderError,
    ReadTimeoutError,
    StreamCancelledError,
    TransportError,
)
from .base.logging import configure_logger
from .base.models import Message, Payload, Protocol, ProviderConfig, Role
from .base.routing import (
    ProviderRouter,
    get_default_router,
    stream_chat_completion,
    stream_chat_completion_sync,
)
from .config import get_provider_config

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "stream_chat_completion",
    "stream_chat_completion_sync",
    "ProviderRouter",
    "get_default_router",
    "Message",
    "Role",
    "ProviderConfig",
    "Payload",
    "Protocol",
    "ErrorCode",
    "ProviderError",
    "ConfigurationError",
    "ConnectTimeoutError",
    "ReadTimeoutError",
    "TransportError",
    "ProtocolError",
    "AuthError",
    "StreamCancelledError",
    "CancellationToken",
    "get_provider_config",
    "configure_logger",
]
