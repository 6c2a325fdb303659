"""
Recording Implementations Package

Exposes concrete implementations of recording interfaces.
"""

from recording.implementations.ffmpeg_joiner import FFmpegJoiner
from recording.implementations.mock_capture import MockCaptureSurface
from recording.implementations.mock_joiner import MockJoiner

# Public API
__all__ = [
    "FFmpegJoiner",
    "MockCaptureSurface",
    "MockJoiner",
]
