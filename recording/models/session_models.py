"""
Session Models

Data classes for a recording session and what it produces.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from core.state_machine import SessionState
from recording.constants import JoinMethod
from storage.models.segment import Segment


@dataclass
class RecordingSession:
    """
    The unit of work for one recording.

    Owned by the SessionController and only mutated on its event worker.
    Lifecycle: created by start(), grows while recording, frozen once
    finalization begins.
    """

    source_id: str
    work_dir: Path
    save_root: Path  # Snapshot of the save path setting at start
    output_label: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    state: SessionState = SessionState.RECORDING
    segments: List[Segment] = field(default_factory=list)
    active_seconds: int = 0
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def segment_count(self) -> int:
        return len(self.segments)

    @property
    def total_bytes(self) -> int:
        return sum(segment.size_bytes for segment in self.segments)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "source_id": self.source_id,
            "work_dir": str(self.work_dir),
            "state": self.state.value,
            "segment_count": self.segment_count,
            "total_bytes": self.total_bytes,
            "active_seconds": self.active_seconds,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class OutputArtifact:
    """The finished recording"""

    path: Path
    source_segment_count: int
    method: JoinMethod

    @property
    def size_bytes(self) -> int:
        return self.path.stat().st_size if self.path.exists() else 0


@dataclass(frozen=True)
class JoinOutcome:
    """
    Typed result of ConcatenationEngine.join().

    Either artifact is set (success) or error is (method FAILED).
    """

    method: JoinMethod
    artifact: Optional[OutputArtifact] = None
    error: Optional[Exception] = None
    work_dir_preserved: bool = False
    skipped_segments: int = 0

    @property
    def succeeded(self) -> bool:
        return self.method != JoinMethod.FAILED and self.artifact is not None
