"""
Protocol-agnostic domain models public surface.

Re-exports the one-class-per-file implementations under
``chatstream_providers.base.models_parts``.
"""

from .models_parts.message import Message, Role
from .models_parts.payload import Payload
from .models_parts.protocol import Protocol
from .models_parts.provider_config import ProviderConfig

__all__ = [
    "Message",
    "Role",
    "Payload",
    "Protocol",
    "ProviderConfig",
]
