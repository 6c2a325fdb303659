"""
Recording Factory

Factory pattern for creating recording implementations.
Automatically selects the FFmpeg joiner or the mock based on availability.

Single place to decide implementation, and to wire a SessionController.
"""

import logging
import shutil
from typing import Literal, Optional

from config.settings import FFMPEG_BINARY
from recording.config import RecorderConfig
from recording.controllers.session_controller import SessionController
from recording.implementations.ffmpeg_joiner import FFmpegJoiner
from recording.implementations.mock_capture import MockCaptureSurface
from recording.implementations.mock_joiner import MockJoiner
from recording.interfaces.capture_surface_interface import CaptureSurfaceInterface
from recording.interfaces.segment_joiner_interface import SegmentJoinerInterface

# Type alias for better type hints
JoinerMode = Literal["auto", "real", "mock"]
CaptureMode = Literal["none", "mock"]


class RecordingFactory:
    """
    Factory for creating joiners, capture surfaces and controllers.

    Usage:
        # Auto-detect (uses FFmpeg if available, mock otherwise)
        joiner = RecordingFactory.create_joiner()

        # Force mock mode (useful for testing)
        joiner = RecordingFactory.create_joiner(mode="mock")

        # Fully wired controller
        controller = RecordingFactory.create_controller(RecorderConfig())
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_joiner(
        cls,
        mode: JoinerMode = "auto",
        config: Optional[RecorderConfig] = None,
    ) -> SegmentJoinerInterface:
        """
        Create a segment joiner.

        Args:
            mode: "auto" (detect), "real" (force FFmpeg), "mock" (force mock)
            config: Supplies the join timeout (None = settings default)

        Returns:
            SegmentJoinerInterface implementation

        Raises:
            RuntimeError: If mode="real" but FFmpeg not available
        """
        if mode == "mock":
            cls._logger.info("Creating Mock Joiner")
            return MockJoiner()

        joiner = FFmpegJoiner(timeout=config.join_timeout_seconds) if config else FFmpegJoiner()

        if mode == "real":
            if not joiner.is_available():
                raise RuntimeError(
                    f"Real joiner requested but {FFMPEG_BINARY} is not on PATH",
                )
            cls._logger.info("Creating FFmpeg Joiner (forced)")
            return joiner

        # mode == "auto" - try real first, fall back to mock
        if joiner.is_available():
            cls._logger.info("Creating FFmpeg Joiner (auto-detected)")
            return joiner

        cls._logger.warning(
            "FFmpeg not available, using Mock Joiner (recordings are raw-joined)",
        )
        return MockJoiner()

    @classmethod
    def create_capture_surface(
        cls,
        mode: CaptureMode = "none",
        simulate_timing: bool = True,
    ) -> Optional[CaptureSurfaceInterface]:
        """
        Create a capture surface.

        The real screen encoder lives in the UI process and pushes segments
        itself, so "none" is the production mode.

        Args:
            mode: "none" (segments are pushed by the caller) or "mock"
            simulate_timing: For mock capture, produce segments in real time
        """
        if mode == "mock":
            cls._logger.info(f"Creating Mock Capture Surface (simulate_timing: {simulate_timing})")
            return MockCaptureSurface(simulate_timing=simulate_timing)

        if mode != "none":
            raise ValueError(f"Unknown capture mode: {mode}")

        return None

    @classmethod
    def create_controller(
        cls,
        config: Optional[RecorderConfig] = None,
        joiner_mode: JoinerMode = "auto",
        capture_mode: CaptureMode = "none",
        simulate_timing: bool = True,
    ) -> SessionController:
        """
        Build a fully wired SessionController.

        Example:
            controller = RecordingFactory.create_controller(
                RecorderConfig(persist=False),
                joiner_mode="mock",
                capture_mode="mock",
            )
        """
        config = config or RecorderConfig()
        return SessionController(
            config=config,
            joiner=cls.create_joiner(joiner_mode, config),
            capture=cls.create_capture_surface(capture_mode, simulate_timing),
        )

    @classmethod
    def is_ffmpeg_available(cls) -> bool:
        """
        Check if FFmpeg is installed (for diagnostics).
        """
        return shutil.which(FFMPEG_BINARY) is not None
