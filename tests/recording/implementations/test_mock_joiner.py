"""
Mock Joiner Tests

To run:
    pytest tests/recording/implementations/test_mock_joiner.py -v
"""

import pytest

from core.errors import JoinError
from recording.utils.recording_utils import write_concat_manifest


@pytest.mark.unit
def test_joins_manifest_in_order(mock_joiner, make_segments, temp_recording_dir):
    segments = make_segments([3, 2])
    manifest = write_concat_manifest([s.path for s in segments], temp_recording_dir / "list.txt")
    output = temp_recording_dir / "out.webm"
    progress = []

    mock_joiner.join(manifest, output, on_progress=progress.append)

    assert output.read_bytes() == b"\x00\x00\x00\x01\x01"
    assert mock_joiner.join_count == 1
    assert progress[-1] == {"segments_joined": 2, "segments_total": 2}


@pytest.mark.unit
def test_simulated_failure(mock_joiner, make_segments, temp_recording_dir):
    segments = make_segments([3])
    manifest = write_concat_manifest([s.path for s in segments], temp_recording_dir / "list.txt")
    output = temp_recording_dir / "out.webm"
    mock_joiner.set_should_fail(True, "codec mismatch")

    with pytest.raises(JoinError, match="codec mismatch"):
        mock_joiner.join(manifest, output)

    assert output.read_bytes() == b"partial"
    assert mock_joiner.is_available() is True
