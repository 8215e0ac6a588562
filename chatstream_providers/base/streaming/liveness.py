"""Liveness monitor for a single in-flight streaming call.

The monitor is a small state machine driven by periodic polls of the
transport's received-byte counter:

``CONNECTING``
    Initial state; no byte received yet.
``RECEIVING``
    At least one byte received.
``COMPLETED``
    The transport finished naturally.
``CONNECT_TIMED_OUT``
    Still connecting after the connect budget elapsed without progress.
``READ_TIMED_OUT``
    Receiving, but no byte-count increase for longer than the read budget.
``CANCELLED``
    Host cancellation observed.

Inactivity is measured against an injectable monotonic clock, so tests can
drive the machine deterministically. Reaching a budget *exactly* counts as a
timeout. The ``abort`` callback fires exactly once, on the first transition
into a failure state; later polls are no-ops.
"""
from __future__ import annotations

import time
from enum import Enum
from typing import Callable, Optional

from ..timeouts import TimeoutConfig


class LivenessState(str, Enum):
    CONNECTING = "connecting"
    RECEIVING = "receiving"
    COMPLETED = "completed"
    CONNECT_TIMED_OUT = "connect_timed_out"
    READ_TIMED_OUT = "read_timed_out"
    CANCELLED = "cancelled"

    @property
    def terminal(self) -> bool:
        return self not in (LivenessState.CONNECTING, LivenessState.RECEIVING)


class LivenessMonitor:
    """Track byte progress and decide when a call has stalled."""

    def __init__(
        self,
        timeouts: TimeoutConfig,
        *,
        clock: Callable[[], float] = time.monotonic,
        abort: Optional[Callable[[], None]] = None,
    ) -> None:
        self._timeouts = timeouts
        self._clock = clock
        self._abort = abort
        self._last_bytes = 0
        self._last_progress = clock()
        self.state = LivenessState.CONNECTING
        self.abort_count = 0

    @property
    def inactivity_seconds(self) -> float:
        """Seconds since the last observed byte-count increase (or start)."""
        return self._clock() - self._last_progress

    @property
    def bytes_seen(self) -> int:
        return self._last_bytes

    def poll(self, byte_count: int) -> LivenessState:
        """Feed the current byte counter; returns the (possibly new) state."""
        if self.state.terminal:
            return self.state
        if byte_count > self._last_bytes:
            self._last_bytes = byte_count
            self._last_progress = self._clock()
            self.state = LivenessState.RECEIVING
            return self.state
        idle = self.inactivity_seconds
        if self.state is LivenessState.CONNECTING and idle >= self._timeouts.connect_timeout_seconds:
            return self._fail(LivenessState.CONNECT_TIMED_OUT)
        if self.state is LivenessState.RECEIVING and idle >= self._timeouts.read_timeout_seconds:
            return self._fail(LivenessState.READ_TIMED_OUT)
        return self.state

    def cancel(self) -> LivenessState:
        """Record host cancellation (aborts the transport)."""
        if self.state.terminal:
            return self.state
        return self._fail(LivenessState.CANCELLED)

    def complete(self) -> LivenessState:
        """Record natural completion of the transport."""
        if not self.state.terminal:
            self.state = LivenessState.COMPLETED
        return self.state

    def _fail(self, state: LivenessState) -> LivenessState:
        self.state = state
        self.abort_count += 1
        if self._abort is not None:
            self._abort()
        return state


__all__ = ["LivenessState", "LivenessMonitor"]
