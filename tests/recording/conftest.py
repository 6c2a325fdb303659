"""
Recording Test Configuration and Fixtures

Shared fixtures for recording module tests.
"""

import shutil
import tempfile
from collections import namedtuple
from pathlib import Path

import pytest

from recording.config import RecorderConfig
from recording.controllers.session_controller import SessionController
from recording.implementations.mock_capture import MockCaptureSurface
from recording.implementations.mock_joiner import MockJoiner
from storage.models.segment import Segment

GiB = 1024**3

DiskUsage = namedtuple("DiskUsage", ["total", "used", "free"])

# =============================================================================
# TEMPORARY FILE/DIRECTORY FIXTURES
# =============================================================================


@pytest.fixture
def temp_recording_dir():
    """
    Provide temporary directory for recordings and working directories.

    Directory is automatically cleaned up after test.
    """
    temp_dir = Path(tempfile.mkdtemp())

    yield temp_dir

    # Cleanup
    if temp_dir.exists():
        shutil.rmtree(temp_dir)


@pytest.fixture
def make_segments(temp_recording_dir):
    """
    Write segment files with the given sizes and return them as Segments.

    Usage:
        def test_join(make_segments):
            segments = make_segments([5000, 0, 3000])
    """
    work_dir = temp_recording_dir / "work"
    work_dir.mkdir()

    def _make(sizes, extension="webm"):
        segments = []
        for index, size in enumerate(sizes):
            path = work_dir / f"segment-{index:06d}.{extension}"
            path.write_bytes(bytes([index % 256]) * size)
            segments.append(Segment(index=index, path=path, size_bytes=size))
        return segments

    _make.work_dir = work_dir
    return _make


# =============================================================================
# CONFIG / DISK FIXTURES
# =============================================================================


@pytest.fixture
def recorder_config(temp_recording_dir):
    """
    Provide RecorderConfig pointing at temp directories, never persisted.

    Usage:
        def test_limit(recorder_config):
            recorder_config.set("max_recording_duration", 3, save=False)
    """
    config = RecorderConfig(persist=False)
    config.set("save_root", str(temp_recording_dir / "Videos"), save=False)
    config.set("temp_root", str(temp_recording_dir / "tmp"), save=False)
    config.set("flush_grace_seconds", 1.0, save=False)
    return config


@pytest.fixture
def fake_disk_usage():
    """
    Provide a shutil.disk_usage stand-in with adjustable free space.

    Usage:
        def test_low(fake_disk_usage):
            fake_disk_usage.free = 50 * 1024**2
    """

    class FakeDiskUsage:
        def __init__(self):
            self.free = 50 * GiB
            self.paths = []
            self.fail = False

        def __call__(self, path):
            self.paths.append(Path(path))
            if self.fail:
                raise OSError("Simulated statvfs failure")
            return DiskUsage(total=100 * GiB, used=100 * GiB - self.free, free=self.free)

    return FakeDiskUsage()


# =============================================================================
# IMPLEMENTATION FIXTURES
# =============================================================================


@pytest.fixture
def mock_joiner():
    """Provide MockJoiner (succeeds unless told otherwise)"""
    return MockJoiner()


@pytest.fixture
def mock_capture_fast():
    """
    Provide MockCaptureSurface without timing simulation (fast tests).
    """
    capture = MockCaptureSurface(simulate_timing=False)
    yield capture
    capture.cleanup()


# =============================================================================
# CONTROLLER FIXTURES
# =============================================================================


@pytest.fixture
def controller(recorder_config, mock_joiner, fake_disk_usage):
    """
    Provide SessionController without a capture surface.

    The test pushes segments itself with controller.on_segment().
    Ticks are slow so the duration guard never interferes.

    Usage:
        def test_save(controller):
            controller.start("screen:0")
            controller.on_segment(b"data", "video/webm")
            controller.stop()
            controller.wait_for_idle(5)
    """
    ctrl = SessionController(
        recorder_config,
        mock_joiner,
        usage_fn=fake_disk_usage,
        tick_interval=3600,
    )
    yield ctrl
    ctrl.shutdown(timeout=5)


@pytest.fixture
def controller_with_capture(recorder_config, mock_joiner, fake_disk_usage, mock_capture_fast):
    """
    Provide SessionController wired to a fast MockCaptureSurface.
    """
    ctrl = SessionController(
        recorder_config,
        mock_joiner,
        capture=mock_capture_fast,
        usage_fn=fake_disk_usage,
        tick_interval=3600,
    )
    yield ctrl
    ctrl.shutdown(timeout=5)


# =============================================================================
# CALLBACK TRACKING FIXTURES
# =============================================================================


@pytest.fixture
def callback_tracker():
    """
    Provide a factory for callback trackers (one per callback under test).

    Usage:
        def test_callback(controller, callback_tracker):
            saved = callback_tracker()
            controller.on_recording_saved = saved.track
            # ... record and stop ...
            assert saved.was_called()
    """

    class CallbackTracker:
        def __init__(self):
            self.calls = []

        def track(self, *args, **kwargs):
            """Record a callback invocation"""
            self.calls.append({"args": args, "kwargs": kwargs})

        def was_called(self) -> bool:
            """Check if callback was called"""
            return len(self.calls) > 0

        def get_call_count(self) -> int:
            """Get number of times callback was called"""
            return len(self.calls)

        def get_last_call(self):
            """Get arguments from last call"""
            return self.calls[-1] if self.calls else None

        def get_all_args(self):
            """Get the positional arguments of every call"""
            return [call["args"] for call in self.calls]

        def reset(self):
            """Clear call history"""
            self.calls.clear()

    return CallbackTracker


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """
    Configure pytest with custom markers for recording tests.
    """
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "unit_integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")
    config.addinivalue_line("markers", "requires_ffmpeg: Tests requiring FFmpeg")
