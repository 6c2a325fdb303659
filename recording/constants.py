"""
Recording Constants

Enums and FFmpeg command construction for the recording system.

Note: Configuration values (durations, thresholds, paths) live in
config/settings.py. This file contains only enums, FFmpeg-specific
constants, and utility functions.
"""

from enum import Enum
from pathlib import Path
from typing import List, Optional

from config.settings import FFMPEG_BINARY, FFMPEG_LOG_LEVEL


# =============================================================================
# JOIN RESULT TRACKING
# =============================================================================


class JoinMethod(Enum):
    """
    How the output file was produced.

    FAILED means no output was produced; the session ends in FAILED.
    """

    COPIED_SINGLE = "copied-single"  # Only one segment, plain file copy
    JOINED_PRIMARY = "joined-primary"  # FFmpeg concat demuxer, stream copy
    JOINED_FALLBACK = "joined-fallback"  # Raw byte concatenation
    FAILED = "failed"


class ConcatenationStatus(Enum):
    """Progress notifications sent to the UI while joining"""

    STARTED = "started"
    PROGRESS = "progress"
    COMPLETE = "complete"
    ERROR = "error"


# =============================================================================
# FFMPEG COMMAND CONFIGURATION
# =============================================================================

# FFmpeg writes key=value progress blocks here; we read them line by line
FFMPEG_PROGRESS_TARGET = "pipe:1"


def get_concat_command(
    manifest_file: Path,
    output_file: Path,
    ffmpeg_binary: str = FFMPEG_BINARY,
    with_progress: bool = True,
) -> List[str]:
    """
    Generate FFmpeg command for a stream copy join.

    Uses the concat demuxer: each input listed in the manifest is read in
    order and packets are copied into one container. Nothing is re-encoded.

    Args:
        manifest_file: Text file with one "file '<path>'" line per segment
        output_file: Joined output path
        ffmpeg_binary: FFmpeg executable
        with_progress: Stream machine-readable progress to stdout

    Returns:
        List of command arguments for subprocess

    Example:
        cmd = get_concat_command(Path("concat_list.txt"), Path("out.webm"))
        subprocess.Popen(cmd)
    """
    command = [
        ffmpeg_binary,
        "-hide_banner",
        "-nostdin",
        # Segments from MediaRecorder often start with odd timestamps
        "-fflags",
        "+genpts",
        # Concat demuxer input
        "-f",
        "concat",
        "-safe",
        "0",  # Manifest holds absolute paths
        "-i",
        str(manifest_file),
        # Stream copy, no re-encode
        "-c",
        "copy",
    ]

    if with_progress:
        command.extend(["-progress", FFMPEG_PROGRESS_TARGET, "-nostats"])

    command.extend(
        [
            "-loglevel",
            FFMPEG_LOG_LEVEL,
            # Output path is always a fresh name, -y only covers our own retries
            "-y",
            str(output_file),
        ],
    )

    return command


def parse_progress_seconds(line: str) -> Optional[float]:
    """
    Extract output position from one FFmpeg -progress line.

    Example:
        parse_progress_seconds("out_time_us=1500000")  # 1.5
        parse_progress_seconds("frame=42")             # None
    """
    key, _, value = line.strip().partition("=")
    if key not in ("out_time_us", "out_time_ms"):
        return None

    try:
        # out_time_ms is actually microseconds too (long-standing FFmpeg quirk)
        return int(value) / 1_000_000
    except ValueError:
        return None


def format_duration(seconds: float) -> str:
    """
    Format duration in seconds to human-readable string.

    Example:
        format_duration(630)   -> "10:30"
        format_duration(7200)  -> "2:00:00"
    """
    seconds = int(seconds)
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"
