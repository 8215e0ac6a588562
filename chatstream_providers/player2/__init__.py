"""Player2 protocol client and local-first auth resolution."""

from .auth import LocalAuthCache, Player2AuthResolver, ResolvedConnection, get_default_auth_cache
from .client import Player2StreamingClient
from .request_builder import build_request_body, merge_messages

__all__ = [
    "Player2StreamingClient",
    "Player2AuthResolver",
    "LocalAuthCache",
    "ResolvedConnection",
    "get_default_auth_cache",
    "build_request_body",
    "merge_messages",
]
