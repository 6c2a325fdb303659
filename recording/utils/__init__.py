"""
Recording Utilities Package

Shared utility functions for recording operations.
"""

from recording.utils.recording_utils import (
    escape_manifest_path,
    generate_output_path,
    read_concat_manifest,
    write_concat_manifest,
)

__all__ = [
    "escape_manifest_path",
    "generate_output_path",
    "read_concat_manifest",
    "write_concat_manifest",
]
