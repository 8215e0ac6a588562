"""Pytest configuration for the chatstream_providers test suite.

Every test runs offline: HTTP goes through ``httpx.MockTransport`` and the
process-wide singletons (default transport, router, Player2 key cache, config
file cache) are reset around each test so no state leaks between tests.
"""

from __future__ import annotations

import json
import logging
from typing import Callable, Iterator, List

import httpx
import pytest

from chatstream_providers.base.http import reset_default_transport, set_default_transport
from chatstream_providers.base.logging import BASE_LOGGER_NAME, LOG_LEVEL_ENV, get_logger
from chatstream_providers.base.routing import reset_default_router
from chatstream_providers.config import reset_config_cache
from chatstream_providers.player2 import get_default_auth_cache


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class EventCapture(logging.Handler):
    """Collect structured log events emitted on the ``chatstream`` logger."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    @property
    def events(self) -> List[dict]:
        out = []
        for record in self.records:
            try:
                out.append(json.loads(record.getMessage()))
            except ValueError:
                continue
        return out

    def named(self, event: str) -> List[dict]:
        return [e for e in self.events if e.get("event") == event]


@pytest.fixture(autouse=True)
def isolate_process_state(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Reset shared singletons and strip ambient configuration env vars."""
    for name in (
        "CHATSTREAM_CONFIG_FILE",
        "CHATSTREAM_LOG_LEVEL",
        "CHATSTREAM_CONNECT_TIMEOUT_SECONDS",
        "CHATSTREAM_READ_TIMEOUT_SECONDS",
        "CHATSTREAM_POLL_INTERVAL_SECONDS",
        "OPENAI_API_KEY",
        "OPENAI_BASE_URL",
        "OPENAI_MODEL",
        "GEMINI_API_KEY",
        "GEMINI_BASE_URL",
        "GEMINI_MODEL",
        "GOOGLE_API_KEY",
        "PLAYER2_API_KEY",
        "PLAYER2_BASE_URL",
        "PLAYER2_MODEL",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_default_transport()
    reset_default_router()
    reset_config_cache()
    get_default_auth_cache().clear()
    yield
    reset_default_transport()
    reset_default_router()
    reset_config_cache()
    get_default_auth_cache().clear()


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def install_transport() -> Callable[[Callable[[httpx.Request], object]], httpx.MockTransport]:
    """Route every client created by the library through a ``MockTransport``."""

    def _install(handler):
        transport = httpx.MockTransport(handler)
        set_default_transport(transport)
        return transport

    return _install


@pytest.fixture()
def events(monkeypatch: pytest.MonkeyPatch) -> Iterator[EventCapture]:
    """Capture structured events at DEBUG level for the duration of a test.

    The level env var is set too, since ``get_logger`` re-applies it whenever
    a client builds its logger.
    """
    monkeypatch.setenv(LOG_LEVEL_ENV, "DEBUG")
    base = get_logger(BASE_LOGGER_NAME)
    handler = EventCapture()
    previous = base.level
    base.setLevel(logging.DEBUG)
    base.addHandler(handler)
    try:
        yield handler
    finally:
        base.removeHandler(handler)
        base.setLevel(previous)
