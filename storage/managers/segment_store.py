"""
Segment Store

Owns a recording session's temporary working directory.
Single responsibility: persist, list and dispose of captured segments.
"""

import logging
import os
import re
import tempfile
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from config.settings import SEGMENT_FILENAME_PREFIX, SEGMENT_INDEX_WIDTH
from core.errors import NotFoundError, ResourceError
from storage.models.segment import Segment
from storage.utils.path_utils import extension_for_mime, remove_directory

SEGMENT_NAME_PATTERN = re.compile(
    rf"^{re.escape(SEGMENT_FILENAME_PREFIX)}(?P<index>\d+)\.(?P<ext>[A-Za-z0-9]+)$",
)


class SegmentStore:
    """
    Persists incoming segment buffers to uniquely indexed files.

    The store's internal counter, not the caller, is the only source of
    ordering: indices are handed out in write order, starting at 0, and only
    advance when a write actually lands on disk.

    Usage:
        store = SegmentStore()
        store.create(Path("/tmp/magic-window"))
        store.write(chunk, "video/webm;codecs=vp9")
        segments = store.list()
        ...
        store.dispose()
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.work_dir: Optional[Path] = None
        self._next_index = 0

    @property
    def next_index(self) -> int:
        return self._next_index

    def create(self, base_temp_root: Path) -> Path:
        """
        Allocate a fresh working directory under base_temp_root.

        Args:
            base_temp_root: Parent directory (created if missing)

        Returns:
            Path of the new working directory

        Raises:
            ResourceError: If the directory can't be created
        """
        try:
            base = Path(base_temp_root)
            base.mkdir(parents=True, exist_ok=True)
            work_dir = Path(tempfile.mkdtemp(prefix="recording-", dir=base))
        except OSError as e:
            raise ResourceError(
                f"Cannot create working directory under {base_temp_root}: {e}",
            ) from e

        self.work_dir = work_dir
        self._next_index = 0

        self.logger.info(f"Working directory created: {work_dir}")
        return work_dir

    def write(self, buffer: bytes, mime_type: Optional[str] = None) -> Optional[Segment]:
        """
        Persist one segment buffer.

        The data is written to a hidden .part file, synced, then renamed into
        place so readers never see a partial segment.

        Args:
            buffer: Segment bytes
            mime_type: Capture MIME type, only used to pick the extension

        Returns:
            The new Segment, or None if the buffer was empty

        Raises:
            ResourceError: If no working directory exists or the write fails
        """
        if not buffer:
            self.logger.warning("Ignoring empty segment buffer")
            return None

        if self.work_dir is None:
            raise ResourceError("Segment store has no working directory")

        index = self._next_index
        extension = extension_for_mime(mime_type)
        final_path = self.work_dir / self._segment_filename(index, extension)
        part_path = self.work_dir / f".{final_path.name}.part"

        try:
            with open(part_path, "wb") as f:
                f.write(buffer)
                f.flush()
                os.fsync(f.fileno())
            os.replace(part_path, final_path)
        except OSError as e:
            try:
                part_path.unlink()
            except OSError:
                pass
            raise ResourceError(f"Failed to write segment {index}: {e}") from e

        self._next_index += 1

        segment = Segment(
            index=index,
            path=final_path,
            size_bytes=len(buffer),
            mime_type=mime_type,
        )
        self.logger.debug(f"Segment {index} written ({len(buffer)} bytes)")
        return segment

    def list(self) -> List[Segment]:
        """
        Re-scan the working directory for segments.

        Sizes come from disk, not from what write() saw. Files that don't
        look like segments are ignored; ones that almost do are logged.

        Returns:
            Segments sorted by numeric index

        Raises:
            NotFoundError: If the working directory no longer exists
        """
        if self.work_dir is None or not self.work_dir.is_dir():
            raise NotFoundError(f"Working directory not found: {self.work_dir}")

        segments = []
        for path in self.work_dir.iterdir():
            if not path.is_file() or not path.name.startswith(SEGMENT_FILENAME_PREFIX):
                continue

            match = SEGMENT_NAME_PATTERN.match(path.name)
            if not match:
                self.logger.warning(f"Skipping malformed segment filename: {path.name}")
                continue

            try:
                stat = path.stat()
            except OSError as e:
                self.logger.warning(f"Cannot stat segment {path.name}: {e}")
                continue

            segments.append(
                Segment(
                    index=int(match.group("index")),
                    path=path,
                    size_bytes=stat.st_size,
                    written_at=datetime.fromtimestamp(stat.st_mtime),
                ),
            )

        segments.sort(key=lambda segment: segment.index)
        return segments

    def dispose(self) -> None:
        """
        Remove the working directory. Best effort, never raises.
        """
        if self.work_dir is None:
            return

        if remove_directory(self.work_dir):
            self.logger.info(f"Working directory removed: {self.work_dir}")
        else:
            self.logger.warning(f"Working directory left behind: {self.work_dir}")

    @staticmethod
    def _segment_filename(index: int, extension: str) -> str:
        return f"{SEGMENT_FILENAME_PREFIX}{index:0{SEGMENT_INDEX_WIDTH}d}.{extension}"
