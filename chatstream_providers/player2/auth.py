"""
Player2 connection resolution: local companion app first, hosted API second.

Purpose
- Produce a ``ResolvedConnection`` (base URL, API key, local flag) for every
  Player2 call.
- Keep the local app's key in a ``LocalAuthCache`` with a TTL so that a
  healthy local app costs zero extra requests per call.

Resolution order
1) Unexpired cached local key -> local URL, no network.
2) ``GET {local}/v1/health`` (2s) then ``POST {local}/v1/login/web/{client_id}``
   (3s, body ``{}``); the ``p2Key`` field of the response is cached and used.
3) Configured remote key -> remote URL.
4) Otherwise ``ConfigurationError``; no request is attempted.

Any failure of the local probe (connection error, HTTP error status,
unparsable body, missing key) only means "local unavailable".

Concurrency
- ``LocalAuthCache`` guards its state with a lock; concurrent calls may race
  to log in or invalidate and the last write wins. Readers never observe a
  half-written key/expiry pair.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

import httpx
from pydantic import ValidationError

from ..base.errors import ConfigurationError
from ..base.http import ClientFactory, create_async_client
from ..base.logging import LogContext, get_logger, log_event
from ..base.timeouts import LOCAL_HEALTH_TIMEOUT_SECONDS, LOCAL_LOGIN_TIMEOUT_SECONDS
from ..config.defaults import PLAYER2_GAME_CLIENT_ID, PLAYER2_LOCAL_KEY_TTL_SECONDS, PLAYER2_LOCAL_URL
from .dto import LocalLoginResponse

PROVIDER = "player2"


@dataclass(frozen=True)
class ResolvedConnection:
    base_url: str
    api_key: str
    is_local: bool


class LocalAuthCache:
    """Process-shared holder of the local app key and its expiry.

    ``clock`` is a monotonic seconds source; tests substitute a fake.
    """

    def __init__(
        self,
        ttl_seconds: float = PLAYER2_LOCAL_KEY_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._key: Optional[str] = None
        self._expiry = 0.0

    def get(self) -> Optional[str]:
        """Return the cached key while ``now < expiry``, else ``None``."""
        with self._lock:
            if self._key and self._clock() < self._expiry:
                return self._key
            return None

    def store(self, key: str) -> None:
        with self._lock:
            self._key = key
            self._expiry = self._clock() + self._ttl

    def clear(self) -> bool:
        """Drop the cached key; returns whether one was held."""
        with self._lock:
            had_key = self._key is not None
            self._key = None
            self._expiry = 0.0
            return had_key


_DEFAULT_CACHE = LocalAuthCache()


def get_default_auth_cache() -> LocalAuthCache:
    """Return the process-wide cache shared by default resolvers."""
    return _DEFAULT_CACHE


class Player2AuthResolver:
    """Resolve the base URL and key for a Player2 call (see module docstring)."""

    def __init__(
        self,
        *,
        cache: Optional[LocalAuthCache] = None,
        client_factory: ClientFactory = create_async_client,
        local_url: str = PLAYER2_LOCAL_URL,
        client_id: str = PLAYER2_GAME_CLIENT_ID,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.cache = cache if cache is not None else get_default_auth_cache()
        self._client_factory = client_factory
        self._local_url = local_url.rstrip("/")
        self._client_id = client_id
        self._logger = logger or get_logger("providers.player2.auth")
        self._ctx = LogContext(provider=PROVIDER, endpoint=self._local_url)

    @property
    def local_url(self) -> str:
        return self._local_url

    async def resolve(self, remote_base_url: str, fallback_api_key: Optional[str]) -> ResolvedConnection:
        cached = self.cache.get()
        if cached:
            log_event(self._logger, "auth.local.hit", self._ctx, level=logging.DEBUG)
            return ResolvedConnection(self._local_url, cached, True)

        key = await self._login_local()
        if key:
            return ResolvedConnection(self._local_url, key, True)

        if fallback_api_key:
            log_event(
                self._logger,
                "auth.remote.fallback",
                LogContext(provider=PROVIDER, endpoint=remote_base_url),
                level=logging.DEBUG,
            )
            return ResolvedConnection(remote_base_url, fallback_api_key, False)

        raise ConfigurationError(
            "Player2 not available: no local app detected and no API key configured",
            PROVIDER,
        )

    def invalidate(self, reason: str) -> None:
        """Forget the local key so the next call probes the app again."""
        if self.cache.clear():
            log_event(self._logger, "auth.cache.invalidated", self._ctx, level=logging.INFO, reason=reason)

    async def _login_local(self) -> Optional[str]:
        async with self._client_factory(timeout=LOCAL_HEALTH_TIMEOUT_SECONDS) as client:
            try:
                health = await client.get(f"{self._local_url}/v1/health", timeout=LOCAL_HEALTH_TIMEOUT_SECONDS)
                health.raise_for_status()
            except httpx.HTTPError as exc:
                self._unavailable("health", exc)
                return None

            try:
                resp = await client.post(
                    f"{self._local_url}/v1/login/web/{self._client_id}",
                    json={},
                    timeout=LOCAL_LOGIN_TIMEOUT_SECONDS,
                )
                resp.raise_for_status()
                login = LocalLoginResponse.model_validate_json(resp.content)
            except (httpx.HTTPError, ValidationError) as exc:
                self._unavailable("login", exc)
                return None

        if not login.p2_key:
            log_event(
                self._logger,
                "auth.local.unavailable",
                self._ctx,
                level=logging.WARNING,
                stage="login",
                error="local app responded without an API key",
            )
            return None
        self.cache.store(login.p2_key)
        log_event(self._logger, "auth.local.login", self._ctx, level=logging.INFO)
        return login.p2_key

    def _unavailable(self, stage: str, exc: Exception) -> None:
        log_event(
            self._logger,
            "auth.local.unavailable",
            self._ctx,
            level=logging.DEBUG,
            stage=stage,
            error=f"{exc.__class__.__name__}: {exc}",
        )


__all__ = [
    "ResolvedConnection",
    "LocalAuthCache",
    "get_default_auth_cache",
    "Player2AuthResolver",
]
