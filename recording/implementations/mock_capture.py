"""
Mock Capture Surface Implementation

Simulated screen capture for testing without a real encoder.
Pushes synthetic segments into the bound sink the way a MediaRecorder
with a timeslice would.

This is a "Fake" (test double) - it has working logic but no real capture.
"""

import logging
import threading
from typing import List, Optional, Tuple

from recording.interfaces.capture_surface_interface import (
    CaptureError,
    CaptureSurfaceInterface,
)

DEFAULT_MOCK_MIME_TYPE = "video/webm;codecs=vp9"


class MockCaptureSurface(CaptureSurfaceInterface):
    """
    Mock capture surface for testing.

    Two modes:
    - simulate_timing=False: nothing is produced on its own. Tests queue
      buffers with queue_final_segment() and push segments themselves.
    - simulate_timing=True: a background thread pushes a segment of
      segment_size bytes every segment_interval seconds while not paused.

    On request_flush() the queued final buffers (if any) are pushed, the
    last one with is_final=True, followed by on_capture_stopped().

    Usage:
        capture = MockCaptureSurface()
        capture.bind(controller)
        capture.queue_final_segment(b"tail bytes")
        controller.start("screen:0")
        controller.stop()   # tail bytes are flushed into the recording
    """

    def __init__(
        self,
        simulate_timing: bool = False,
        segment_interval: float = 1.0,
        segment_size: int = 64 * 1024,
        mime_type: str = DEFAULT_MOCK_MIME_TYPE,
    ):
        """
        Initialize mock capture surface.

        Args:
            simulate_timing: Produce segments in real time on a thread
            segment_interval: Seconds between simulated segments
            segment_size: Bytes per simulated segment
            mime_type: MIME type reported with every segment
        """
        self.logger = logging.getLogger(__name__)
        self.simulate_timing = simulate_timing
        self.segment_interval = segment_interval
        self.segment_size = segment_size
        self.mime_type = mime_type

        # State tracking
        self._is_capturing = False
        self._is_paused = False
        self.source_id: Optional[str] = None
        self.session_id: Optional[str] = None
        self._segments_pushed = 0

        # Simulation thread (if using real timing)
        self._capture_thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

        # Configuration for test scenarios
        self._should_fail_start = False
        self._respond_to_flush = True
        self._final_buffers: List[Tuple[bytes, str]] = []

        # Call log for assertions
        self.calls: List[str] = []

        self.logger.info(
            f"Mock Capture Surface initialized (simulate_timing: {simulate_timing})",
        )

    def start_capture(self, source_id: str, session_id: Optional[str] = None) -> None:
        self.calls.append("start")

        if self._should_fail_start:
            self.logger.error("[MOCK] Simulated start failure")
            raise CaptureError("Simulated capture source failure")

        self.source_id = source_id
        self.session_id = session_id
        self._is_capturing = True
        self._is_paused = False
        self._segments_pushed = 0

        self.logger.info(f"[MOCK] Capture started (source: {source_id})")

        if self.simulate_timing:
            self._stop_event.clear()
            self._capture_thread = threading.Thread(
                target=self._capture_worker,
                daemon=True,
                name="MockCapture-Worker",
            )
            self._capture_thread.start()

    def pause_capture(self) -> None:
        self.calls.append("pause")
        self._is_paused = True

    def resume_capture(self) -> None:
        self.calls.append("resume")
        self._is_paused = False

    def request_flush(self) -> None:
        """
        Stop producing, push the queued final buffers, signal stopped.
        """
        self.calls.append("flush")
        self._stop_worker()
        self._is_capturing = False

        if not self._respond_to_flush:
            self.logger.warning("[MOCK] Ignoring flush request")
            return

        # Only the very last buffer carries the is_final flag
        last = len(self._final_buffers) - 1
        for position, (buffer, mime_type) in enumerate(self._final_buffers):
            self._push(buffer, mime_type, is_final=position == last)
        self._final_buffers = []

        if self.sink is not None:
            self.sink.on_capture_stopped(session_id=self.session_id)

    def is_capturing(self) -> bool:
        return self._is_capturing

    def cleanup(self) -> None:
        """Stop capture and clean up"""
        self.logger.debug("[MOCK] Cleanup")
        self._stop_worker()
        self._is_capturing = False

    def _capture_worker(self) -> None:
        """
        Background thread that simulates a MediaRecorder timeslice.
        """
        while not self._stop_event.wait(self.segment_interval):
            if self._is_paused:
                continue
            self._push(b"\x1a\x45\xdf\xa3" + b"\x00" * (self.segment_size - 4), self.mime_type)

    def _stop_worker(self) -> None:
        self._stop_event.set()
        thread = self._capture_thread
        self._capture_thread = None
        if thread and thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout=2.0)

    def _push(self, buffer: bytes, mime_type: str, is_final: bool = False) -> None:
        if self.sink is None:
            self.logger.warning("[MOCK] No sink bound, dropping segment")
            return

        self._segments_pushed += 1
        self.sink.on_segment(buffer, mime_type, is_final, session_id=self.session_id)

    # =========================================================================
    # TESTING HELPER METHODS (not part of CaptureSurfaceInterface)
    # =========================================================================
    # These methods are ONLY for testing - configure mock behavior

    def simulate_start_failure(self) -> None:
        """
        Configure mock to fail on next start_capture() call.
        """
        self._should_fail_start = True
        self.logger.debug("[MOCK] Configured to fail on start")

    def simulate_unresponsive_flush(self) -> None:
        """
        Configure mock to ignore flush requests, so the controller has to
        fall back on its grace period.
        """
        self._respond_to_flush = False

    def queue_final_segment(self, buffer: bytes, mime_type: str = DEFAULT_MOCK_MIME_TYPE) -> None:
        """Queue a buffer to be pushed as the last segment on flush"""
        self._final_buffers.append((buffer, mime_type))

    def get_segments_pushed(self) -> int:
        return self._segments_pushed

    def reset_test_config(self) -> None:
        """
        Reset test configuration to normal operation.
        """
        self._should_fail_start = False
        self._respond_to_flush = True
        self._final_buffers = []
        self.calls = []
        self.logger.debug("[MOCK] Test configuration reset")
