"""
FFmpeg Segment Joiner Implementation

Real stream copy join using an FFmpeg subprocess and the concat demuxer.
No re-encoding: packets from each segment are copied into one container.

This wraps FFmpeg to match our SegmentJoinerInterface.
"""

import logging
import shutil
import subprocess
import threading
from pathlib import Path
from typing import Optional

from config.settings import CONCAT_LOG_NAME, FFMPEG_BINARY, JOIN_TIMEOUT_SECONDS
from core.errors import JoinError
from recording.constants import get_concat_command, parse_progress_seconds
from recording.interfaces.segment_joiner_interface import (
    ProgressCallback,
    SegmentJoinerInterface,
)


class FFmpegJoiner(SegmentJoinerInterface):
    """
    FFmpeg-based segment joiner.

    Progress is read from FFmpeg's -progress output on stdout. Errors go to
    a log file next to the manifest (inside the session working directory)
    so a stuck stderr pipe can never deadlock the join, and so the log is
    still there for diagnosis when the working directory is preserved.

    Usage:
        joiner = FFmpegJoiner()
        joiner.join(Path("concat_list.txt"), Path("out.webm"))
    """

    def __init__(
        self,
        ffmpeg_binary: str = FFMPEG_BINARY,
        timeout: float = JOIN_TIMEOUT_SECONDS,
    ):
        """
        Initialize FFmpeg joiner.

        Args:
            ffmpeg_binary: FFmpeg executable name or path
            timeout: Seconds before a running join is killed
        """
        self.logger = logging.getLogger(__name__)
        self.ffmpeg_binary = ffmpeg_binary
        self.timeout = timeout

        self._process: Optional[subprocess.Popen] = None
        self._timed_out = False

        self.logger.info(f"FFmpeg Joiner initialized (binary: {ffmpeg_binary})")

    def join(
        self,
        manifest_file: Path,
        output_file: Path,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        """
        Run FFmpeg's concat demuxer over the manifest.

        Blocks until FFmpeg exits. Raises JoinError on any failure.
        """
        command = get_concat_command(
            manifest_file,
            output_file,
            ffmpeg_binary=self.ffmpeg_binary,
        )
        log_file = Path(manifest_file).parent / CONCAT_LOG_NAME

        self.logger.info(f"Starting FFmpeg join to: {output_file}")
        self.logger.debug(f"FFmpeg command: {' '.join(command)}")

        self._timed_out = False
        watchdog = None

        try:
            with open(log_file, "wb") as stderr_log:
                # stdin=DEVNULL: FFmpeg must never wait for keyboard input
                self._process = subprocess.Popen(
                    command,
                    stdout=subprocess.PIPE,
                    stderr=stderr_log,
                    stdin=subprocess.DEVNULL,
                    text=True,
                )

                watchdog = threading.Timer(self.timeout, self._kill_on_timeout)
                watchdog.daemon = True
                watchdog.start()

                assert self._process.stdout is not None
                for line in self._process.stdout:
                    seconds = parse_progress_seconds(line)
                    if seconds is not None and on_progress:
                        try:
                            on_progress({"out_time_seconds": seconds})
                        except Exception as e:
                            self.logger.error(f"Error in progress callback: {e}")

                returncode = self._process.wait()

        except FileNotFoundError as e:
            raise JoinError(f"FFmpeg not found ({self.ffmpeg_binary}): {e}") from e
        except OSError as e:
            raise JoinError(f"Failed to run FFmpeg: {e}") from e
        finally:
            if watchdog:
                watchdog.cancel()
            self._process = None

        if self._timed_out:
            raise JoinError(f"FFmpeg join timed out after {self.timeout:.0f}s")

        if returncode != 0:
            raise JoinError(
                f"FFmpeg exited with code {returncode}: {self._read_log_tail(log_file)}",
            )

        if not output_file.exists() or output_file.stat().st_size == 0:
            raise JoinError(f"FFmpeg produced no output: {output_file}")

        size_mb = output_file.stat().st_size / (1024 * 1024)
        self.logger.info(f"FFmpeg join complete: {output_file} ({size_mb:.1f} MB)")

    def is_available(self) -> bool:
        """
        Check if FFmpeg is installed.
        """
        if not shutil.which(self.ffmpeg_binary):
            self.logger.warning(f"FFmpeg not found in PATH ({self.ffmpeg_binary})")
            return False
        return True

    def _kill_on_timeout(self) -> None:
        process = self._process
        if process and process.poll() is None:
            self.logger.error("FFmpeg join timed out, killing")
            self._timed_out = True
            process.kill()

    @staticmethod
    def _read_log_tail(log_file: Path, limit: int = 1000) -> str:
        try:
            return log_file.read_text(encoding="utf-8", errors="ignore")[-limit:].strip()
        except OSError:
            return "(no FFmpeg log)"
