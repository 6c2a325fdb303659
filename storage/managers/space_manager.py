"""
Space Manager

Monitors free disk space on the output volume during a recording.
Single responsibility: disk space sampling and classification only.
"""

import logging
import shutil
from pathlib import Path
from typing import Callable, Optional

from config.settings import DISK_CRITICAL_BYTES, DISK_LOW_BYTES, DISK_POLL_INTERVAL
from core.ticker import Ticker
from storage.constants import DiskSpaceStatus
from storage.models.segment import DiskSpaceReading
from storage.utils.path_utils import format_size, nearest_existing_parent


def classify_free_space(
    free_bytes: int,
    critical_bytes: int = DISK_CRITICAL_BYTES,
    low_bytes: int = DISK_LOW_BYTES,
) -> DiskSpaceStatus:
    """
    Classify free space against the two thresholds.

    A value equal to a threshold lands on the less severe side, so exactly
    100 MiB free is LOW, not CRITICAL.

    Example:
        classify_free_space(50 * 1024**2)  # DiskSpaceStatus.CRITICAL
        classify_free_space(5 * 1024**3)   # DiskSpaceStatus.OK
    """
    if free_bytes < critical_bytes:
        return DiskSpaceStatus.CRITICAL
    if free_bytes < low_bytes:
        return DiskSpaceStatus.LOW
    return DiskSpaceStatus.OK


class DiskSpaceMonitor:
    """
    Periodic free space poller.

    Responsibilities:
    - Sample free space on a fixed period
    - Classify each sample as ok / low / critical
    - Report every sample (the UI debounces display itself)

    It never stops a recording: a critical reading is just reported, and the
    SessionController decides what to do with it. A failed query is logged
    and skipped.

    Usage:
        monitor = DiskSpaceMonitor()
        monitor.start(Path("/home/me/Videos"), on_reading=print)
        ...
        monitor.stop()
    """

    def __init__(
        self,
        critical_bytes: int = DISK_CRITICAL_BYTES,
        low_bytes: int = DISK_LOW_BYTES,
        usage_fn: Callable = shutil.disk_usage,
    ):
        """
        Initialize space monitor.

        Args:
            critical_bytes: Below this, readings are CRITICAL
            low_bytes: Below this, readings are LOW
            usage_fn: shutil.disk_usage compatible function (swap in tests)
        """
        self.logger = logging.getLogger(__name__)
        self.critical_bytes = critical_bytes
        self.low_bytes = low_bytes
        self._usage_fn = usage_fn

        self._path: Optional[Path] = None
        self._on_reading: Optional[Callable[[DiskSpaceReading], None]] = None
        self._ticker: Optional[Ticker] = None
        self.last_reading: Optional[DiskSpaceReading] = None

        if low_bytes < critical_bytes:
            self.logger.warning(
                "Low space threshold is below the critical threshold. "
                "LOW readings will never be reported.",
            )

    def start(
        self,
        path: Path,
        interval: float = DISK_POLL_INTERVAL,
        on_reading: Optional[Callable[[DiskSpaceReading], None]] = None,
    ) -> Optional[DiskSpaceReading]:
        """
        Start polling.

        The first reading is taken (and reported) before this returns.

        Args:
            path: Any path on the volume to watch
            interval: Seconds between polls
            on_reading: Called with every DiskSpaceReading

        Returns:
            The first reading, or None if the query failed
        """
        self.stop()

        self._path = Path(path)
        self._on_reading = on_reading

        first = self.poll()

        self._ticker = Ticker(interval, self.poll, name="DiskSpaceMonitor")
        self._ticker.start()

        self.logger.info(f"Disk space monitor started (path: {self._path}, every {interval}s)")
        return first

    def stop(self) -> None:
        """Stop polling. Idempotent."""
        if self._ticker is not None:
            self._ticker.stop()
            self._ticker = None
            self.logger.info("Disk space monitor stopped")

    def is_running(self) -> bool:
        return self._ticker is not None and self._ticker.is_running()

    def poll(self) -> Optional[DiskSpaceReading]:
        """
        Take one reading and report it.

        Returns:
            The reading, or None if the disk query failed
        """
        if self._path is None:
            return None

        reading = self.read(self._path)
        if reading is None:
            return None

        self.last_reading = reading
        self._log_reading(reading)

        if self._on_reading:
            try:
                self._on_reading(reading)
            except Exception as e:
                self.logger.error(f"Error in disk space callback: {e}")

        return reading

    def read(self, path: Path) -> Optional[DiskSpaceReading]:
        """Sample free space for path without reporting it"""
        try:
            usage = self._usage_fn(nearest_existing_parent(path))
        except OSError as e:
            self.logger.warning(f"Disk space query failed for {path}: {e}")
            return None

        status = classify_free_space(usage.free, self.critical_bytes, self.low_bytes)
        return DiskSpaceReading(free_bytes=usage.free, status=status)

    def _log_reading(self, reading: DiskSpaceReading) -> None:
        free = format_size(reading.free_bytes)
        if reading.status == DiskSpaceStatus.CRITICAL:
            self.logger.error(f"DISK CRITICAL: {free} free")
        elif reading.status == DiskSpaceStatus.LOW:
            self.logger.warning(f"LOW SPACE: {free} free")
        else:
            self.logger.debug(f"Space OK: {free} free")
