"""
Recorder Configuration Tests

To run:
    pytest tests/recording/test_recorder_config.py -v
"""

from pathlib import Path

import pytest
import yaml

import config.settings as settings
from recording.config import RecorderConfig


@pytest.fixture
def config_file(temp_recording_dir):
    return temp_recording_dir / "config" / "recorder.yaml"


@pytest.mark.unit
def test_defaults_from_settings(config_file):
    config = RecorderConfig(config_path=config_file)

    assert config.max_recording_duration == settings.MAX_RECORDING_DURATION
    assert config.disk_critical_bytes == settings.DISK_CRITICAL_BYTES
    assert config.disk_low_bytes == settings.DISK_LOW_BYTES
    assert config.flush_grace_seconds == settings.FLUSH_GRACE_SECONDS
    assert config.output_label == settings.OUTPUT_LABEL
    assert config.save_root == Path(settings.DEFAULT_SAVE_ROOT).expanduser()
    assert not config_file.exists()


@pytest.mark.unit
def test_yaml_overrides_defaults(config_file):
    config_file.parent.mkdir(parents=True)
    config_file.write_text(yaml.dump({"save_root": "/data/videos", "max_recording_duration": 600}))

    config = RecorderConfig(config_path=config_file)

    assert config.save_root == Path("/data/videos")
    assert config.max_recording_duration == 600
    assert config.disk_poll_interval == settings.DISK_POLL_INTERVAL


@pytest.mark.unit
def test_broken_yaml_falls_back_to_defaults(config_file):
    config_file.parent.mkdir(parents=True)
    config_file.write_text("save_root: [unclosed")

    config = RecorderConfig(config_path=config_file)

    assert config.save_root == Path(settings.DEFAULT_SAVE_ROOT).expanduser()


@pytest.mark.unit
@pytest.mark.parametrize(
    "overrides",
    [
        {"max_recording_duration": 0},
        {"disk_poll_interval": -5},
        {"flush_grace_seconds": -1},
        {"output_label": ""},
        {"output_label": "a/b"},
    ],
)
def test_invalid_values_rejected(config_file, overrides):
    config_file.parent.mkdir(parents=True)
    config_file.write_text(yaml.dump(overrides))

    with pytest.raises(ValueError):
        RecorderConfig(config_path=config_file)


@pytest.mark.unit
def test_set_persists_and_reloads(config_file, temp_recording_dir):
    """Test set() writes the YAML file that a new instance reads back."""
    config = RecorderConfig(config_path=config_file)
    new_root = temp_recording_dir / "Movies"

    config.set("save_root", str(new_root))

    assert yaml.safe_load(config_file.read_text())["save_root"] == str(new_root)
    assert RecorderConfig(config_path=config_file).save_root == new_root

    config.set("save_root", "/elsewhere", save=False)
    config.reload()
    assert config.save_root == new_root


@pytest.mark.unit
def test_persist_false_never_touches_disk(config_file):
    config = RecorderConfig(config_path=config_file, persist=False)

    config.set("save_root", "/somewhere")

    assert config.get("save_root") == "/somewhere"
    assert not config_file.exists()
    assert config.to_dict()["save_root"] == "/somewhere"
