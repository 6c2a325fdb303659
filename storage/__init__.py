"""
Storage Module

Segment and disk space management for the screen recorder.

Architecture:
- managers/: Specialized domain logic (segment store, disk space monitor)
- models/: Data structures
- utils/: Shared path helpers
"""

# ============================================================================
# storage/__init__.py - Main Package Exports
# ============================================================================

from storage.constants import DiskSpaceStatus
from storage.managers.segment_store import SegmentStore
from storage.managers.space_manager import DiskSpaceMonitor, classify_free_space
from storage.models.segment import DiskSpaceReading, Segment

# Public API - what users import
__all__ = [
    "DiskSpaceMonitor",
    "DiskSpaceReading",
    "DiskSpaceStatus",
    "Segment",
    "SegmentStore",
    "classify_free_space",
]
