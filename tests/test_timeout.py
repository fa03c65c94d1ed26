"""Tests for the per-stage watchdog."""

from __future__ import annotations

import threading

import pytest

from structfuzz.harness import Timeout

# Generous bound for "the watchdog thread got to run".
_WAIT_S = 5.0


def _join(timeout: Timeout) -> None:
    thread = timeout._thread
    if thread is not None:
        thread.join(_WAIT_S)


class TestStart:
    """Test arming the timer."""

    def test_fires_callback_then_expire(self) -> None:
        """On expiry the callback runs before on_expire."""
        order: list[str] = []
        expired = threading.Event()

        def on_expire() -> None:
            order.append("expire")
            expired.set()

        timeout = Timeout(on_expire=on_expire)
        timeout.start(5, lambda: order.append("callback"))
        assert expired.wait(_WAIT_S)
        assert order == ["callback", "expire"]
        assert timeout.timed_out

    def test_zero_disables(self) -> None:
        """start(0, ...) arms nothing."""
        timeout = Timeout(on_expire=lambda: None)
        timeout.start(0, lambda: pytest.fail("fired"))
        assert timeout._thread is None
        assert not timeout.timed_out

    def test_negative_rejected(self) -> None:
        """Negative durations are a programming error."""
        timeout = Timeout(on_expire=lambda: None)
        with pytest.raises(ValueError, match="invalid timeout"):
            timeout.start(-1, lambda: None)

    def test_double_start_rejected(self) -> None:
        """Only one timer per Timeout at a time."""
        timeout = Timeout(on_expire=lambda: None)
        timeout.start(60_000, lambda: None)
        try:
            with pytest.raises(RuntimeError, match="failed to start timer"):
                timeout.start(60_000, lambda: None)
        finally:
            timeout.cancel()
            _join(timeout)

    def test_start_after_fire_rejected(self) -> None:
        """A fired Timeout stays fired."""
        expired = threading.Event()
        timeout = Timeout(on_expire=expired.set)
        timeout.start(1, lambda: None)
        assert expired.wait(_WAIT_S)
        with pytest.raises(RuntimeError):
            timeout.start(10, lambda: None)


class TestCancel:
    """Test disarming the timer."""

    def test_cancel_prevents_callback(self) -> None:
        """A cancelled timer never calls back."""
        called = threading.Event()
        timeout = Timeout(on_expire=called.set)
        timeout.start(60_000, called.set)
        timeout.cancel()
        _join(timeout)
        assert not called.is_set()
        assert not timeout.timed_out

    def test_restart_after_cancel(self) -> None:
        """Cancelling returns the Timeout to idle."""
        timeout = Timeout(on_expire=lambda: None)
        timeout.start(60_000, lambda: None)
        timeout.cancel()
        timeout.start(60_000, lambda: None)
        timeout.dispose()
        _join(timeout)

    def test_cancel_when_idle(self) -> None:
        """Cancelling an idle timer is harmless."""
        timeout = Timeout(on_expire=lambda: None)
        timeout.cancel()
        assert not timeout.timed_out

    def test_cancel_after_fire_keeps_state(self) -> None:
        """cancel() cannot undo an expiry."""
        expired = threading.Event()
        timeout = Timeout(on_expire=expired.set)
        timeout.start(1, lambda: None)
        assert expired.wait(_WAIT_S)
        timeout.cancel()
        assert timeout.timed_out

    def test_race_has_one_winner(self) -> None:
        """Fired and cancelled are mutually exclusive."""
        for _ in range(50):
            called = threading.Event()
            timeout = Timeout(on_expire=lambda: None)
            timeout.start(1, called.set)
            timeout.cancel()
            _join(timeout)
            assert called.is_set() == timeout.timed_out
