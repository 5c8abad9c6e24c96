"""
Debounce Timer

Single-shot timer that restarts on every start() call, so a burst of
requests fires the callback once, one interval after the last request.
"""

from __future__ import annotations
import time
from typing import Any, Callable, Optional


class DebounceTimer:
    """Cancel-and-reschedule single-shot timer.

    The timer is not tied to an event loop. Either pass ``call_later``
    (for example ``asyncio.get_event_loop().call_later``) and the timer
    schedules itself, or leave it out and call ``poll()`` from the host's
    own loop; the callback runs from ``poll()`` once the deadline passed.
    """

    def __init__(
        self,
        interval_ms: int,
        callback: Callable[[], Any],
        clock: Callable[[], float] = time.monotonic,
        call_later: Optional[Callable[..., Any]] = None,
    ):
        """Initialize the timer.

        Args:
            interval_ms: Delay between the last start() and the callback
            callback: Called with no arguments when the timer fires
            clock: Monotonic clock in seconds
            call_later: Optional scheduler called as call_later(delay_s, fn),
                        returning a handle with a cancel() method
        """
        if interval_ms < 0:
            raise ValueError(f"Debounce interval must not be negative: {interval_ms}")
        self.interval_ms = interval_ms
        self._callback = callback
        self._clock = clock
        self._call_later = call_later
        self._deadline: Optional[float] = None
        self._handle = None

    @property
    def is_active(self) -> bool:
        return self._deadline is not None

    def remaining(self) -> float:
        """Seconds until the timer fires, 0 when inactive or overdue."""
        if self._deadline is None:
            return 0.0
        return max(0.0, self._deadline - self._clock())

    def start(self):
        """Arm the timer, replacing any pending deadline."""
        self._cancel_handle()
        delay = self.interval_ms / 1000.0
        self._deadline = self._clock() + delay
        if self._call_later is not None:
            self._handle = self._call_later(delay, self._on_scheduled)

    def stop(self):
        self._cancel_handle()
        self._deadline = None

    def poll(self) -> bool:
        """Fire the callback if the deadline has passed.

        Returns:
            True if the callback ran
        """
        if self._deadline is None or self._clock() < self._deadline:
            return False
        self._fire()
        return True

    def fire_now(self) -> bool:
        """Run a pending callback immediately instead of waiting."""
        if self._deadline is None:
            return False
        self._fire()
        return True

    def _on_scheduled(self):
        self._handle = None
        if self._deadline is not None:
            self._fire()

    def _fire(self):
        self._cancel_handle()
        self._deadline = None
        self._callback()

    def _cancel_handle(self):
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
