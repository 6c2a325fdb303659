"""
Recording Module

Turns a stream of captured segments into one saved recording.

Provides automatic detection and graceful fallback between the FFmpeg
joiner and a mock implementation for testing.

Public API:
    - SessionController: Session lifecycle, commands and notifications
    - RecordingFactory: Factory for joiners, capture surfaces, controllers
    - RecorderConfig: YAML-backed preferences (save path, limits)
    - ConcatenationEngine / DurationGuard: Building blocks
    - CaptureSurfaceInterface / SegmentJoinerInterface: Contracts
    - JoinMethod / ConcatenationStatus: Enumerations

Usage:
    from recording import RecorderConfig, RecordingFactory

    controller = RecordingFactory.create_controller(RecorderConfig())
    controller.on_recording_saved = lambda path: print("Saved", path)

    controller.start("screen:0")
    controller.on_segment(chunk, "video/webm")
    controller.stop()
"""

from recording.config import RecorderConfig
from recording.constants import ConcatenationStatus, JoinMethod
from recording.controllers.concatenation_engine import ConcatenationEngine
from recording.controllers.duration_guard import DurationGuard
from recording.controllers.session_controller import SessionController
from recording.factory import RecordingFactory
from recording.interfaces.capture_surface_interface import (
    CaptureError,
    CaptureSurfaceInterface,
)
from recording.interfaces.segment_joiner_interface import SegmentJoinerInterface
from recording.models.session_models import JoinOutcome, OutputArtifact, RecordingSession
from recording.utils.recording_utils import generate_output_path

__all__ = [
    "CaptureError",
    "CaptureSurfaceInterface",
    "ConcatenationEngine",
    "ConcatenationStatus",
    "DurationGuard",
    "JoinMethod",
    "JoinOutcome",
    "OutputArtifact",
    "RecorderConfig",
    "RecordingFactory",
    "RecordingSession",
    "SegmentJoinerInterface",
    "SessionController",
    "generate_output_path",
]
