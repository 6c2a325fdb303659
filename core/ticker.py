"""
Periodic Ticker

Background thread that calls a function on a fixed period until stopped.
Used for the 1 Hz duration tick and the disk space poll.
"""

import logging
import threading
from typing import Callable, Optional


class Ticker:
    """
    Fixed-period background caller.

    The first call happens one interval after start(). Exceptions raised by
    the callback are logged and the ticker keeps running.

    Usage:
        ticker = Ticker(1.0, lambda: print("tick"), name="DurationTick")
        ticker.start()
        ...
        ticker.stop()
    """

    def __init__(self, interval: float, callback: Callable[[], None], name: str = "Ticker"):
        if interval <= 0:
            raise ValueError(f"Ticker interval must be positive: {interval}")

        self.logger = logging.getLogger(__name__)
        self.interval = interval
        self.callback = callback
        self.name = name

        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    def start(self) -> None:
        if self.is_running():
            self.logger.debug(f"{self.name} already running")
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._worker,
            daemon=True,
            name=self.name,
        )
        self._thread.start()
        self.logger.debug(f"{self.name} started ({self.interval}s)")

    def stop(self, timeout: float = 2.0) -> None:
        """Stop ticking. Idempotent, and safe to call from the callback itself."""
        self._stop_event.set()

        thread = self._thread
        self._thread = None
        if thread and thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout=timeout)
            self.logger.debug(f"{self.name} stopped")

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _worker(self) -> None:
        # wait() returns True once stop() is called
        while not self._stop_event.wait(self.interval):
            try:
                self.callback()
            except Exception as e:
                self.logger.error(f"Error in {self.name} callback: {e}", exc_info=True)
