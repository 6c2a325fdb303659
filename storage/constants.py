"""
Storage Module Enums

Type definitions for the storage module.
Configuration values live in config/settings.py following the
"ALL config in config/settings.py" principle.

This module contains only Enum types and fixed lookup tables.
"""

from enum import Enum

# =============================================================================
# ENUMS
# =============================================================================


class DiskSpaceStatus(Enum):
    """Free space classification of the output volume"""

    OK = "ok"  # Normal operation
    LOW = "low"  # Below warning threshold, UI warns
    CRITICAL = "critical"  # Below minimum, recording is stopped


# =============================================================================
# SEGMENT FILE TYPES
# =============================================================================

# MIME container prefix -> file extension. Matched with startswith() so
# codec parameters ("video/webm;codecs=vp9") are ignored.
MIME_EXTENSIONS = (
    ("video/webm", "webm"),
    ("audio/webm", "webm"),
    ("video/x-matroska", "mkv"),
    ("video/mp4", "mp4"),
    ("video/quicktime", "mov"),
)
