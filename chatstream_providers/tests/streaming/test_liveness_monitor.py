"""Liveness state machine driven by a fake clock."""
from __future__ import annotations

from chatstream_providers.base.streaming import LivenessMonitor, LivenessState
from chatstream_providers.base.timeouts import TimeoutConfig

CFG = TimeoutConfig(connect_timeout_seconds=10.0, read_timeout_seconds=3.0, poll_interval_seconds=0.1)


class _Abort:
    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> None:
        self.calls += 1


def test_connect_timeout_fires_exactly_at_threshold(fake_clock):
    abort = _Abort()
    mon = LivenessMonitor(CFG, clock=fake_clock, abort=abort)
    fake_clock.advance(9.5)
    assert mon.poll(0) is LivenessState.CONNECTING
    fake_clock.advance(0.5)
    assert mon.poll(0) is LivenessState.CONNECT_TIMED_OUT
    assert abort.calls == 1


def test_abort_fires_once_even_if_polled_again(fake_clock):
    abort = _Abort()
    mon = LivenessMonitor(CFG, clock=fake_clock, abort=abort)
    fake_clock.advance(20)
    mon.poll(0)
    fake_clock.advance(20)
    mon.poll(0)
    mon.cancel()
    assert mon.state is LivenessState.CONNECT_TIMED_OUT
    assert abort.calls == 1
    assert mon.abort_count == 1


def test_progress_resets_inactivity_and_enters_receiving(fake_clock):
    mon = LivenessMonitor(CFG, clock=fake_clock)
    fake_clock.advance(9.0)
    assert mon.poll(5) is LivenessState.RECEIVING
    assert mon.inactivity_seconds == 0.0
    fake_clock.advance(2.9)
    assert mon.poll(5) is LivenessState.RECEIVING
    fake_clock.advance(2.0)
    assert mon.poll(9) is LivenessState.RECEIVING
    assert mon.bytes_seen == 9


def test_read_timeout_after_progress(fake_clock):
    abort = _Abort()
    mon = LivenessMonitor(CFG, clock=fake_clock, abort=abort)
    mon.poll(1)
    fake_clock.advance(3.0)
    assert mon.poll(1) is LivenessState.READ_TIMED_OUT
    assert abort.calls == 1


def test_slow_start_is_not_a_read_timeout(fake_clock):
    mon = LivenessMonitor(CFG, clock=fake_clock)
    fake_clock.advance(5.0)
    assert mon.poll(0) is LivenessState.CONNECTING


def test_cancel_aborts_and_is_terminal(fake_clock):
    abort = _Abort()
    mon = LivenessMonitor(CFG, clock=fake_clock, abort=abort)
    assert mon.cancel() is LivenessState.CANCELLED
    assert abort.calls == 1
    fake_clock.advance(100)
    assert mon.poll(0) is LivenessState.CANCELLED


def test_complete_does_not_abort(fake_clock):
    abort = _Abort()
    mon = LivenessMonitor(CFG, clock=fake_clock, abort=abort)
    mon.poll(10)
    assert mon.complete() is LivenessState.COMPLETED
    assert mon.state.terminal
    assert abort.calls == 0
