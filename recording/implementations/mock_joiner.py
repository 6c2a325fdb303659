"""
Mock Segment Joiner Implementation

Simulated stream copy join for testing without FFmpeg.

This is a "Fake" (test double) - it has working logic (it reads the real
manifest and writes the segments' bytes in order) but no external process.
"""

import logging
from pathlib import Path
from typing import List, Optional

from core.errors import JoinError
from recording.interfaces.segment_joiner_interface import (
    ProgressCallback,
    SegmentJoinerInterface,
)
from recording.utils.recording_utils import read_concat_manifest


class MockJoiner(SegmentJoinerInterface):
    """
    Mock joiner for testing.

    Usage:
        joiner = MockJoiner()
        joiner.join(manifest, output)

        # Exercise the fallback path
        joiner.set_should_fail(True)
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

        # Configuration for test scenarios
        self._should_fail = False
        self._failure_message = "Simulated FFmpeg failure"

        # Inspection helpers
        self.join_count = 0
        self.last_inputs: List[Path] = []

        self.logger.info("Mock Joiner initialized")

    def join(
        self,
        manifest_file: Path,
        output_file: Path,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.join_count += 1
        inputs = read_concat_manifest(manifest_file)
        self.last_inputs = inputs

        if self._should_fail:
            self.logger.error(f"[MOCK] {self._failure_message}")
            # Leave a partial file behind, like a crashed FFmpeg would
            output_file.write_bytes(b"partial")
            raise JoinError(self._failure_message)

        try:
            with open(output_file, "wb") as out:
                for position, path in enumerate(inputs, start=1):
                    out.write(path.read_bytes())
                    if on_progress:
                        on_progress({"segments_joined": position, "segments_total": len(inputs)})
        except OSError as e:
            raise JoinError(f"[MOCK] join failed: {e}") from e

        self.logger.info(f"[MOCK] Joined {len(inputs)} segments into {output_file}")

    def is_available(self) -> bool:
        return True

    # =========================================================================
    # TEST HELPER METHODS
    # =========================================================================

    def set_should_fail(self, should_fail: bool, message: Optional[str] = None) -> None:
        """Configure joins to raise JoinError"""
        self._should_fail = should_fail
        if message:
            self._failure_message = message
