"""
FFmpeg Joiner Tests

Command construction and failure handling run everywhere; real joins are
marked requires_ffmpeg and skipped when FFmpeg isn't installed.

To run:
    pytest tests/recording/implementations/test_ffmpeg_joiner.py -v
"""

import shutil
import subprocess
from pathlib import Path

import pytest

from core.errors import JoinError
from recording.constants import get_concat_command, parse_progress_seconds
from recording.implementations.ffmpeg_joiner import FFmpegJoiner
from recording.utils.recording_utils import write_concat_manifest

HAS_FFMPEG = shutil.which("ffmpeg") is not None

# =============================================================================
# COMMAND TESTS
# =============================================================================


@pytest.mark.unit
def test_concat_command_uses_stream_copy():
    command = get_concat_command(Path("/tmp/w/concat_list.txt"), Path("/tmp/out.webm"), "ffmpeg")

    assert command[0] == "ffmpeg"
    assert command[command.index("-f") + 1] == "concat"
    assert command[command.index("-safe") + 1] == "0"
    assert command[command.index("-i") + 1] == "/tmp/w/concat_list.txt"
    assert command[command.index("-c") + 1] == "copy"
    assert command[command.index("-progress") + 1] == "pipe:1"
    assert command[-1] == "/tmp/out.webm"


@pytest.mark.unit
def test_concat_command_without_progress():
    command = get_concat_command(Path("list.txt"), Path("out.mp4"), with_progress=False)

    assert "-progress" not in command
    assert "-nostats" not in command


@pytest.mark.unit
@pytest.mark.parametrize(
    "line, expected",
    [
        ("out_time_us=1500000", 1.5),
        ("out_time_ms=2000000\n", 2.0),
        ("out_time_us=N/A", None),
        ("frame=42", None),
        ("progress=end", None),
    ],
)
def test_parse_progress_seconds(line, expected):
    assert parse_progress_seconds(line) == expected


# =============================================================================
# FAILURE TESTS
# =============================================================================


@pytest.mark.unit
def test_missing_binary_raises_join_error(make_segments, temp_recording_dir):
    segments = make_segments([10, 10])
    manifest = write_concat_manifest([s.path for s in segments], make_segments.work_dir / "list.txt")
    joiner = FFmpegJoiner(ffmpeg_binary="definitely-not-ffmpeg-xyz")

    assert joiner.is_available() is False
    with pytest.raises(JoinError, match="not found"):
        joiner.join(manifest, temp_recording_dir / "out.webm")


@pytest.mark.requires_ffmpeg
@pytest.mark.skipif(not HAS_FFMPEG, reason="FFmpeg not installed")
def test_garbage_segments_fail(make_segments, temp_recording_dir):
    """Test undecodable input makes FFmpeg exit non-zero."""
    segments = make_segments([100, 100])
    manifest = write_concat_manifest([s.path for s in segments], make_segments.work_dir / "list.txt")

    with pytest.raises(JoinError):
        FFmpegJoiner().join(manifest, temp_recording_dir / "out.webm")

    assert (make_segments.work_dir / "concat.log").exists()


# =============================================================================
# REAL JOIN TESTS
# =============================================================================


def _make_clip(path: Path) -> None:
    subprocess.run(
        [
            "ffmpeg", "-hide_banner", "-loglevel", "error", "-y",
            "-f", "lavfi", "-i", "testsrc=duration=1:size=64x64:rate=10",
            "-c:v", "mpeg2video", str(path),
        ],
        check=True,
        stdin=subprocess.DEVNULL,
    )


@pytest.mark.requires_ffmpeg
@pytest.mark.slow
@pytest.mark.skipif(not HAS_FFMPEG, reason="FFmpeg not installed")
def test_real_join(temp_recording_dir):
    work_dir = temp_recording_dir / "work"
    work_dir.mkdir()
    clips = [work_dir / f"segment-00000{i}.ts" for i in range(2)]
    for clip in clips:
        _make_clip(clip)

    manifest = write_concat_manifest(clips, work_dir / "concat_list.txt")
    output = temp_recording_dir / "joined.ts"
    progress = []

    FFmpegJoiner().join(manifest, output, on_progress=progress.append)

    assert output.stat().st_size > 0
    assert all("out_time_seconds" in p for p in progress)
