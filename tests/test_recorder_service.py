"""
Recorder Service Tests

Control-file command handling and status output, driven against a
controller with a mock joiner and no capture surface.

To run:
    pytest tests/test_recorder_service.py -v
"""

import json
import shutil
import tempfile
from collections import namedtuple
from pathlib import Path

import pytest

from core.state_machine import SessionState
from recorder_service import RecorderService
from recording.config import RecorderConfig
from recording.controllers.session_controller import SessionController
from recording.implementations.mock_joiner import MockJoiner

DiskUsage = namedtuple("DiskUsage", ["total", "used", "free"])


@pytest.fixture
def temp_dir():
    temp_dir = Path(tempfile.mkdtemp())
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def service(temp_dir):
    config = RecorderConfig(persist=False)
    config.set("save_root", str(temp_dir / "Videos"), save=False)
    config.set("temp_root", str(temp_dir / "tmp"), save=False)

    controller = SessionController(
        config,
        MockJoiner(),
        usage_fn=lambda path: DiskUsage(100 * 1024**3, 0, 100 * 1024**3),
        tick_interval=3600,
    )
    service = RecorderService(
        config=config,
        controller=controller,
        control_file=temp_dir / "recorder_control.cmd",
        status_file=temp_dir / "recorder_status.json",
    )
    yield service
    controller.shutdown(timeout=5)


@pytest.mark.unit
def test_start_pause_resume_stop(service):
    assert service.process_command("START screen:0") is True
    assert service.controller.state == SessionState.RECORDING

    assert service.process_command("pause") is True
    assert service.controller.state == SessionState.PAUSED

    assert service.process_command("RESUME") is True

    service.controller.on_segment(b"\x01" * 1000, "video/webm")
    assert service.process_command("STOP") is True
    assert service.controller.wait_for_idle(5)

    assert service.last_saved is not None
    assert Path(service.last_saved).stat().st_size == 1000


@pytest.mark.unit
def test_start_without_source_rejected(service):
    assert service.process_command("START") is False
    assert service.controller.state == SessionState.IDLE


@pytest.mark.unit
def test_unknown_command(service):
    assert service.process_command("EXTEND") is False


@pytest.mark.unit
def test_savepath_command(service, temp_dir):
    target = temp_dir / "Movies"

    assert service.process_command(f"SAVEPATH {target}") is True
    assert service.controller.current_settings()["save_path"] == str(target)

    assert service.process_command("SAVEPATH") is False


@pytest.mark.unit
def test_empty_recording_counts_as_error(service):
    service.process_command("START screen:0")
    service.process_command("STOP")
    assert service.controller.wait_for_idle(5)

    assert service.error_count == 1


@pytest.mark.unit
def test_control_file_is_consumed(service):
    service.control_file.write_text("START screen:7\n")

    service._check_control_commands()

    assert not service.control_file.exists()
    assert service.controller.session.source_id == "screen:7"


@pytest.mark.unit
def test_status_file_written(service):
    service.process_command("START screen:0")
    service.process_command("STATUS")

    status = json.loads(service.status_file.read_text())

    assert status["state"] == "recording"
    assert status["session"]["source_id"] == "screen:0"
    assert "pid" in status


@pytest.mark.unit
def test_shutdown_saves_and_writes_status(service):
    service.process_command("START screen:0")
    service.controller.on_segment(b"\x01" * 10, "video/webm")

    service._shutdown()

    assert service.last_saved is not None
    assert json.loads(service.status_file.read_text())["state"] == "idle"
