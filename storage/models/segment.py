"""
Segment Models

Data classes describing captured segments and disk space readings.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from storage.constants import DiskSpaceStatus


@dataclass(frozen=True)
class Segment:
    """
    One captured chunk of media persisted in a session working directory.

    Created by SegmentStore.write() and never mutated. Deleted only when
    the whole working directory is torn down.
    """

    index: int  # Assigned by SegmentStore, contiguous from 0
    path: Path
    size_bytes: int
    mime_type: Optional[str] = None  # Best effort, only picks the extension
    written_at: datetime = field(default_factory=datetime.now)

    @property
    def is_empty(self) -> bool:
        """Zero-byte segments stay on disk but are never joined"""
        return self.size_bytes == 0

    @property
    def extension(self) -> str:
        return self.path.suffix.lstrip(".")


@dataclass(frozen=True)
class DiskSpaceReading:
    """Free space sample, recomputed every poll and never persisted"""

    free_bytes: int
    status: DiskSpaceStatus

    @property
    def is_critical(self) -> bool:
        return self.status == DiskSpaceStatus.CRITICAL
