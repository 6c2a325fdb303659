"""
Duration Guard

Caps how long a recording can run.
Counts active (non-paused) seconds and signals once when the cap is hit.
"""

import logging
import threading
from typing import Callable, Optional

from config.settings import DURATION_TICK_INTERVAL, MAX_RECORDING_DURATION
from core.ticker import Ticker
from recording.constants import format_duration


def _call_now(func: Callable[[], None]) -> None:
    func()


class DurationGuard:
    """
    1 Hz recording timer with a one-shot limit signal.

    The guard never stops the recording itself: when the limit is reached
    it calls on_limit_reached and stops ticking, and the SessionController
    decides what happens next.

    Ticks go through `dispatch`, so the controller can route them into its
    event queue instead of having the ticker thread touch session state.
    Without a dispatcher, ticks run directly on the ticker thread.

    Usage:
        guard = DurationGuard(on_limit_reached=lambda: print("time's up"))
        guard.start(limit_seconds=7200)
        guard.pause()
        guard.resume()
        guard.stop()
    """

    def __init__(
        self,
        on_limit_reached: Optional[Callable[[], None]] = None,
        tick_interval: float = DURATION_TICK_INTERVAL,
        dispatch: Optional[Callable[[Callable[[], None]], None]] = None,
    ):
        self.logger = logging.getLogger(__name__)
        self.on_limit_reached = on_limit_reached
        self.tick_interval = tick_interval
        self._dispatch = dispatch or _call_now

        self.limit_seconds = MAX_RECORDING_DURATION
        self._elapsed = 0
        self._paused = False
        self._running = False
        self._limit_fired = False
        self._ticker: Optional[Ticker] = None
        self._lock = threading.Lock()

    @property
    def elapsed_seconds(self) -> int:
        return self._elapsed

    @property
    def remaining_seconds(self) -> int:
        return max(0, self.limit_seconds - self._elapsed)

    @property
    def is_paused(self) -> bool:
        return self._paused

    def is_running(self) -> bool:
        return self._running

    def start(self, limit_seconds: int = MAX_RECORDING_DURATION) -> None:
        """
        Reset the counter and start ticking.

        Args:
            limit_seconds: Active seconds allowed before the limit signal
        """
        if limit_seconds <= 0:
            raise ValueError(f"Invalid duration limit: {limit_seconds}s")

        self.stop()

        with self._lock:
            self.limit_seconds = limit_seconds
            self._elapsed = 0
            self._paused = False
            self._limit_fired = False
            self._running = True

        self._ticker = Ticker(
            self.tick_interval,
            lambda: self._dispatch(self.tick),
            name="DurationGuard",
        )
        self._ticker.start()

        self.logger.info(f"Duration guard started (limit: {format_duration(limit_seconds)})")

    def pause(self) -> None:
        """Stop counting ticks. The counter is kept."""
        self._paused = True
        self.logger.debug(f"Duration guard paused at {self._elapsed}s")

    def resume(self) -> None:
        """Count ticks again, from where pause() left off."""
        self._paused = False
        self.logger.debug(f"Duration guard resumed at {self._elapsed}s")

    def stop(self) -> None:
        """Cancel the ticker and discard accumulated state. Idempotent."""
        if self._ticker is not None:
            self._ticker.stop()
            self._ticker = None

        with self._lock:
            was_running = self._running
            self._running = False
            self._elapsed = 0
            self._paused = False

        if was_running:
            self.logger.info("Duration guard stopped")

    def tick(self) -> bool:
        """
        Account for one elapsed second.

        Ticks while paused or after the guard stopped are ignored.

        Returns:
            True if this tick hit the limit (the signal fired)
        """
        with self._lock:
            if not self._running or self._paused or self._limit_fired:
                return False

            self._elapsed += 1
            if self._elapsed < self.limit_seconds:
                return False

            self._limit_fired = True
            self._running = False

        self.logger.info(
            f"Recording limit reached ({format_duration(self.limit_seconds)})",
        )

        if self._ticker is not None:
            self._ticker.stop()
            self._ticker = None

        if self.on_limit_reached:
            try:
                self.on_limit_reached()
            except Exception as e:
                self.logger.error(f"Error in limit reached callback: {e}")

        return True
