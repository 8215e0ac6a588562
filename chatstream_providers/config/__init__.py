"""Configuration layer producing ``ProviderConfig`` values.

Goals
-----
* Centralize defaults (base URLs, models).
* Merge sources in a predictable order (later wins):
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) pointed to by
       CHATSTREAM_CONFIG_FILE
    3. Environment variables (e.g. OPENAI_MODEL, OPENAI_API_KEY)
    4. In-code overrides passed to the helper
* Provide a single call site: ``get_provider_config(protocol)``.

Environment Variable Conventions
--------------------------------
<PROTOCOL>_BASE_URL, <PROTOCOL>_API_KEY, <PROTOCOL>_MODEL
e.g. OPENAI_BASE_URL, GEMINI_MODEL. Gemini also accepts GOOGLE_API_KEY.

External Config File
--------------------
JSON is tried first, then YAML. Structure example:

```
openai:
  base_url: http://localhost:1234
  model: qwen2.5-7b-instruct
player2:
  api_key: sk-...
```

Public API
----------
* get_provider_config(protocol, overrides=None) -> ProviderConfig
* reset_config_cache()
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from ..base.errors import ConfigurationError
from ..base.models import Protocol, ProviderConfig
from .defaults import (
    GEMINI_DEFAULT_BASE_URL,
    GEMINI_DEFAULT_MODEL,
    OPENAI_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_MODEL,
    PLAYER2_DEFAULT_BASE_URL,
)
from .env import is_placeholder, resolve_api_key

CONFIG_FILE_ENV = "CHATSTREAM_CONFIG_FILE"

DEFAULTS: Dict[Protocol, Dict[str, Any]] = {
    Protocol.OPENAI: {"base_url": OPENAI_DEFAULT_BASE_URL, "model": OPENAI_DEFAULT_MODEL},
    Protocol.GEMINI: {"base_url": GEMINI_DEFAULT_BASE_URL, "model": GEMINI_DEFAULT_MODEL},
    Protocol.PLAYER2: {"base_url": PLAYER2_DEFAULT_BASE_URL},
}

ENV_FIELD_MAP = {
    "base_url": "BASE_URL",
    "model": "MODEL",
}

_FIELDS = ("base_url", "api_key", "model", "extra_headers")

_FILE_CACHE: Optional[Dict[str, Any]] = None


def reset_config_cache() -> None:
    """Forget the parsed config file so the next lookup re-reads it."""
    global _FILE_CACHE
    _FILE_CACHE = None


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv(CONFIG_FILE_ENV)
    if not path or not Path(path).is_file():
        _FILE_CACHE = {}
        return _FILE_CACHE
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"unreadable config file {path}: {exc}", "config") from exc
    _FILE_CACHE = data if isinstance(data, dict) else {}
    return _FILE_CACHE


def _clean(values: Mapping[str, Any]) -> Dict[str, Any]:
    """Keep known fields whose values are set; drop placeholder API keys."""
    out: Dict[str, Any] = {}
    for k, v in values.items():
        if k not in _FIELDS or v is None:
            continue
        if isinstance(v, str) and not v.strip():
            continue
        if k == "api_key" and is_placeholder(v):
            continue
        out[k] = v
    return out


def _env_overrides(protocol: Protocol) -> Dict[str, Any]:
    prefix = protocol.value.upper()
    out: Dict[str, Any] = {
        field: os.getenv(f"{prefix}_{suffix}") for field, suffix in ENV_FIELD_MAP.items()
    }
    out["api_key"], _ = resolve_api_key(protocol.value)
    return _clean(out)


def get_provider_config(
    protocol: Protocol | str,
    overrides: Optional[Mapping[str, Any]] = None,
) -> ProviderConfig:
    """Return the merged configuration for ``protocol``.

    Merge order (later wins): defaults -> external config -> env vars -> overrides
    """
    proto = Protocol.parse(protocol)
    cfg: Dict[str, Any] = dict(DEFAULTS[proto])

    file_cfg = _load_external_config().get(proto.value)
    if isinstance(file_cfg, dict):
        cfg |= _clean(file_cfg)

    cfg |= _env_overrides(proto)

    if overrides:
        cfg |= _clean(overrides)

    return ProviderConfig(protocol=proto, **cfg)


__all__ = [
    "get_provider_config",
    "reset_config_cache",
    "DEFAULTS",
    "CONFIG_FILE_ENV",
]
