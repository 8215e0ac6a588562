"""Protocol routing."""

from .router import (
    ProviderRouter,
    get_default_router,
    reset_default_router,
    stream_chat_completion,
    stream_chat_completion_sync,
)

__all__ = [
    "ProviderRouter",
    "get_default_router",
    "reset_default_router",
    "stream_chat_completion",
    "stream_chat_completion_sync",
]
