"""
Concatenation Engine Tests

Tests for ConcatenationEngine showing:
- Single segment copy
- Primary join through the joiner
- Raw fallback when the joiner fails
- Failure when the fallback fails too (work dir preserved)
- Empty recordings

To run:
    pytest tests/recording/controllers/test_concatenation_engine.py -v
"""

from pathlib import Path

import pytest

from core.errors import EmptyRecordingError, FallbackJoinError
from recording.constants import ConcatenationStatus, JoinMethod
from recording.controllers.concatenation_engine import ConcatenationEngine
from storage.models.segment import Segment


@pytest.fixture
def engine(mock_joiner):
    return ConcatenationEngine(mock_joiner)


@pytest.fixture
def output_path(temp_recording_dir):
    return temp_recording_dir / "out" / "recording.webm"


@pytest.fixture(autouse=True)
def output_dir(output_path):
    output_path.parent.mkdir()


# =============================================================================
# SUCCESS TESTS
# =============================================================================


@pytest.mark.unit
def test_single_segment_is_copied(engine, make_segments, output_path, mock_joiner):
    segments = make_segments([4096])

    outcome = engine.join(segments, output_path, work_dir=make_segments.work_dir)

    assert outcome.succeeded
    assert outcome.method == JoinMethod.COPIED_SINGLE
    assert output_path.read_bytes() == b"\x00" * 4096
    assert mock_joiner.join_count == 0
    assert not make_segments.work_dir.exists()


@pytest.mark.unit
def test_primary_join_skips_empty_segments(engine, make_segments, output_path, mock_joiner):
    """Test {5000, 0, 3000} joins to 8000 bytes with only the valid inputs."""
    segments = make_segments([5000, 0, 3000])

    outcome = engine.join(segments, output_path, work_dir=make_segments.work_dir)

    assert [segment.is_empty for segment in segments] == [False, True, False]
    assert outcome.method == JoinMethod.JOINED_PRIMARY
    assert outcome.skipped_segments == 1
    assert outcome.artifact.source_segment_count == 2
    assert output_path.stat().st_size == 8000
    assert [p.name for p in mock_joiner.last_inputs] == [
        "segment-000000.webm",
        "segment-000002.webm",
    ]
    assert not make_segments.work_dir.exists()


@pytest.mark.unit
def test_fallback_when_primary_fails(engine, make_segments, output_path, mock_joiner):
    """Test raw concatenation replaces the joiner's partial output."""
    mock_joiner.set_should_fail(True)
    segments = make_segments([5000, 3000])

    outcome = engine.join(segments, output_path, work_dir=make_segments.work_dir)

    assert outcome.method == JoinMethod.JOINED_FALLBACK
    assert output_path.stat().st_size == 8000
    assert output_path.read_bytes() == b"\x00" * 5000 + b"\x01" * 3000
    assert not make_segments.work_dir.exists()


@pytest.mark.unit
def test_manifest_without_work_dir_is_removed(engine, make_segments, output_path):
    segments = make_segments([10, 20])

    outcome = engine.join(segments, output_path)

    assert outcome.method == JoinMethod.JOINED_PRIMARY
    assert sorted(p.name for p in output_path.parent.iterdir()) == ["recording.webm"]
    assert make_segments.work_dir.exists()  # not ours to remove


@pytest.mark.unit
def test_status_sequence(engine, make_segments, output_path):
    statuses = []
    segments = make_segments([10, 20, 30])

    engine.join(segments, output_path, on_status=lambda s, d: statuses.append((s, d)))

    names = [status for status, _ in statuses]
    assert names[0] == ConcatenationStatus.STARTED
    assert statuses[0][1]["segments"] == 3
    assert statuses[0][1]["total_bytes"] == 60
    assert names.count(ConcatenationStatus.PROGRESS) == 3
    assert names[-1] == ConcatenationStatus.COMPLETE
    assert statuses[-1][1]["method"] == "joined-primary"


# =============================================================================
# FAILURE TESTS
# =============================================================================


@pytest.mark.unit
@pytest.mark.parametrize("sizes", [[], [0], [0, 0, 0]])
def test_nothing_to_join(engine, make_segments, output_path, sizes):
    with pytest.raises(EmptyRecordingError):
        engine.join(make_segments(sizes), output_path, work_dir=make_segments.work_dir)

    assert not output_path.exists()


@pytest.mark.unit
def test_fallback_failure_preserves_work_dir(engine, make_segments, output_path, mock_joiner):
    """Test a failed fallback removes the partial output and keeps segments."""
    mock_joiner.set_should_fail(True)
    segments = make_segments([5000])
    missing = Segment(index=1, path=make_segments.work_dir / "segment-000001.webm", size_bytes=3000)
    statuses = []

    outcome = engine.join(
        segments + [missing],
        output_path,
        work_dir=make_segments.work_dir,
        on_status=lambda s, d: statuses.append(s),
    )

    assert outcome.method == JoinMethod.FAILED
    assert outcome.succeeded is False
    assert outcome.work_dir_preserved is True
    assert isinstance(outcome.error, FallbackJoinError)
    assert outcome.error.work_dir == make_segments.work_dir
    assert str(make_segments.work_dir) in str(outcome.error)
    assert not output_path.exists()
    assert segments[0].path.exists()
    assert statuses[-1] == ConcatenationStatus.ERROR


@pytest.mark.unit
def test_single_copy_failure_preserves_work_dir(engine, make_segments, output_path):
    ghost = Segment(index=0, path=Path(make_segments.work_dir / "segment-000000.webm"), size_bytes=10)

    outcome = engine.join([ghost], output_path, work_dir=make_segments.work_dir)

    assert outcome.method == JoinMethod.FAILED
    assert outcome.work_dir_preserved is True
    assert make_segments.work_dir.exists()
