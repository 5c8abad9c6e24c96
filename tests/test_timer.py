"""
Unit tests for DebounceTimer.
"""

import pytest

from autotile.timer import DebounceTimer


class FakeScheduler:
    """Stands in for an event loop's call_later."""

    class Handle:
        def __init__(self, callback):
            self.callback = callback
            self.cancelled = False

        def cancel(self):
            self.cancelled = True

    def __init__(self):
        self.handles = []

    def __call__(self, delay, callback):
        handle = self.Handle(callback)
        handle.delay = delay
        self.handles.append(handle)
        return handle

    def run_pending(self):
        for handle in list(self.handles):
            if not handle.cancelled:
                handle.callback()


@pytest.mark.unit
class TestDebounceTimer:
    """Test debounce behaviour with a polled clock and a scheduler."""

    def test_negative_interval_rejected(self):
        """Test negative intervals raise ValueError."""
        with pytest.raises(ValueError):
            DebounceTimer(-1, lambda: None)

    def test_fires_once_after_interval(self, clock):
        """Test poll() fires only once the deadline passed."""
        calls = []
        timer = DebounceTimer(100, lambda: calls.append(1), clock=clock)

        timer.start()
        clock.advance_ms(50)
        assert not timer.poll()

        clock.advance_ms(50)
        assert timer.poll()
        assert calls == [1]
        assert not timer.is_active
        assert not timer.poll()

    def test_restart_pushes_deadline(self, clock):
        """Test a burst of starts fires one interval after the last."""
        calls = []
        timer = DebounceTimer(100, lambda: calls.append(1), clock=clock)

        timer.start()
        clock.advance_ms(80)
        timer.start()
        clock.advance_ms(80)
        assert not timer.poll()

        clock.advance_ms(30)
        assert timer.poll()
        assert calls == [1]

    def test_remaining(self, clock):
        """Test remaining() counts down and is zero when idle."""
        timer = DebounceTimer(100, lambda: None, clock=clock)
        assert timer.remaining() == 0.0

        timer.start()
        clock.advance_ms(40)

        assert timer.remaining() == pytest.approx(0.06)

    def test_stop(self, clock):
        """Test a stopped timer never fires."""
        calls = []
        timer = DebounceTimer(100, lambda: calls.append(1), clock=clock)

        timer.start()
        timer.stop()
        clock.advance_ms(200)

        assert not timer.poll()
        assert calls == []

    def test_fire_now(self, clock):
        """Test fire_now() runs a pending callback early."""
        calls = []
        timer = DebounceTimer(100, lambda: calls.append(1), clock=clock)

        assert not timer.fire_now()
        timer.start()

        assert timer.fire_now()
        assert calls == [1]

    def test_call_later_scheduling(self, clock):
        """Test restarts cancel the previously scheduled callback."""
        calls = []
        scheduler = FakeScheduler()
        timer = DebounceTimer(100, lambda: calls.append(1), clock=clock, call_later=scheduler)

        timer.start()
        timer.start()

        assert len(scheduler.handles) == 2
        assert scheduler.handles[0].cancelled
        assert scheduler.handles[1].delay == pytest.approx(0.1)

        scheduler.run_pending()

        assert calls == [1]
        assert not timer.is_active
