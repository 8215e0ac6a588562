"""chatstream_providers.config.defaults
====================================

Central place for small, stable default values used across the
chatstream_providers package. These defaults can be overridden via
environment variables or external configuration, but provide sensible
fallbacks for local development and tests.

This module intentionally avoids importing from other packages to prevent
circular dependencies. Only plain constants should live here.
"""

from __future__ import annotations

# ---- OpenAI-style ----
# Root URL; "/v1/chat/completions" is appended when the URL has no path.
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com"
OPENAI_DEFAULT_MODEL = "gpt-4o-mini"

# ---- Gemini ----
GEMINI_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
GEMINI_DEFAULT_MODEL = "gemini-2.5-flash"

# ---- Player2 ----
PLAYER2_DEFAULT_BASE_URL = "https://api.player2.game"
# Companion desktop app; health and login endpoints live under this root.
PLAYER2_LOCAL_URL = "http://localhost:4315"
# Fixed client identifier sent as the game-key header and used for local login.
PLAYER2_GAME_CLIENT_ID = "019a8368-b00b-72bc-b367-2825079dc6fb"
PLAYER2_GAME_KEY_HEADER = "player2-game-key"
PLAYER2_LOCAL_KEY_TTL_SECONDS = 30 * 60


__all__ = [
    "OPENAI_DEFAULT_BASE_URL",
    "OPENAI_DEFAULT_MODEL",
    "GEMINI_DEFAULT_BASE_URL",
    "GEMINI_DEFAULT_MODEL",
    "PLAYER2_DEFAULT_BASE_URL",
    "PLAYER2_LOCAL_URL",
    "PLAYER2_GAME_CLIENT_ID",
    "PLAYER2_GAME_KEY_HEADER",
    "PLAYER2_LOCAL_KEY_TTL_SECONDS",
]
