"""
Remote Control Script Tests

To run:
    pytest tests/cli/test_remote_control.py -v
"""

import pytest

from scripts.remote_control import build_command, print_status, send_command


@pytest.mark.unit
@pytest.mark.parametrize(
    "command, argument, expected",
    [
        ("start", "screen:0", "START screen:0"),
        ("stop", "", "STOP"),
        ("pause", "ignored", "PAUSE"),
        ("savepath", " /data/videos ", "SAVEPATH /data/videos"),
        ("STATUS", "", "STATUS"),
    ],
)
def test_build_command(command, argument, expected):
    assert build_command(command, argument) == expected


@pytest.mark.unit
@pytest.mark.parametrize("command, argument", [("extend", ""), ("start", ""), ("savepath", "  ")])
def test_build_command_rejects(command, argument):
    with pytest.raises(ValueError):
        build_command(command, argument)


@pytest.mark.unit
def test_send_command_writes_control_file(tmp_path):
    control_file = tmp_path / "recorder_control.cmd"

    assert send_command("start", "window:3", control_file=control_file) is True
    assert control_file.read_text() == "START window:3"

    assert send_command("bogus", control_file=control_file) is False


@pytest.mark.unit
def test_print_status_missing_file(tmp_path, capsys):
    print_status(tmp_path / "missing.json")

    assert "No status available" in capsys.readouterr().out
