"""chatstream_providers.config.env
===============================

Environment variable mapping and helpers for protocol credentials.

Purpose
-------
- Provide a single source of truth for mapping protocol identifiers to their
  API key environment variable names (canonical and aliases).
- Offer small utilities to look up keys in a consistent way.

Design Notes
------------
- Canonical mapping is defined in ``ENV_MAP``. Gemini keys are commonly
  exported as ``GOOGLE_API_KEY``; ``ENV_ALIASES`` lists the canonical name
  first to establish precedence.
- Placeholder values (``changeme``, ``<placeholder>``...) are treated as unset
  so a template ``.env`` never reaches the wire as a credential.

Failure Modes
-------------
- Functions return ``None`` when a protocol is unknown or no value is present.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

# Canonical protocol -> env var mapping
ENV_MAP: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "player2": "PLAYER2_API_KEY",
}


# Protocol -> ordered tuple of acceptable env var names (canonical first)
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the provided string looks like a placeholder/test value.

    Heuristics: contains 'placeholder', 'changeme', 'example', or starts with
    'test_'. The check is case-insensitive and resilient to surrounding spaces.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return (
        "placeholder" in v
        or "changeme" in v
        or "example" in v
        or v.startswith("test_")
    )


def get_env_var_candidates(protocol: str) -> Iterable[str]:
    """Yield acceptable API key variable names for a protocol, canonical first."""
    p = (protocol or "").lower()
    canonical = ENV_MAP.get(p)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get(p, ()):
        if alias != canonical:
            yield alias


def resolve_api_key(protocol: str) -> Tuple[Optional[str], Optional[str]]:
    """Resolve an API key for a protocol from the process environment.

    Returns
    -------
    Tuple[Optional[str], Optional[str]]
        ``(value, env_var_used)`` for the first non-empty, non-placeholder
        value; ``(None, None)`` when nothing usable is set.
    """
    for name in get_env_var_candidates(protocol):
        val = os.environ.get(name)
        if val and not is_placeholder(val):
            return val, name
    return None, None


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "is_placeholder",
    "get_env_var_candidates",
    "resolve_api_key",
]
