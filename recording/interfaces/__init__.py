"""
Recording Interfaces Package

Exposes abstract interfaces for recording components.
"""

from recording.interfaces.capture_surface_interface import (
    CaptureError,
    CaptureSurfaceInterface,
)
from recording.interfaces.segment_joiner_interface import (
    ProgressCallback,
    SegmentJoinerInterface,
)

# Public API
__all__ = [
    # Exceptions
    "CaptureError",
    # Interfaces
    "CaptureSurfaceInterface",
    "ProgressCallback",
    "SegmentJoinerInterface",
]
