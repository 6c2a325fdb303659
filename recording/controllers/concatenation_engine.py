"""
Concatenation Engine

Turns an ordered list of segments into one output file.

Strategy, in priority order:
1. No segment with data      -> EmptyRecordingError, no output file
2. Exactly one               -> plain byte copy (copied-single)
3. Several                   -> stream copy join via the primary joiner
4. Primary join failed       -> raw byte concatenation (joined-fallback)
5. Fallback failed as well   -> FAILED outcome, working directory kept

The raw fallback is a best-effort recovery of footage that would otherwise
be lost: container correctness across segment boundaries isn't guaranteed
for every encoding.
"""

import logging
import shutil
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from config.settings import CONCAT_MANIFEST_NAME, FALLBACK_COPY_CHUNK_BYTES
from core.errors import EmptyRecordingError, FallbackJoinError, JoinError, ResourceError
from recording.constants import ConcatenationStatus, JoinMethod
from recording.interfaces.segment_joiner_interface import SegmentJoinerInterface
from recording.models.session_models import JoinOutcome, OutputArtifact
from recording.utils.recording_utils import write_concat_manifest
from storage.models.segment import Segment
from storage.utils.path_utils import format_size, remove_directory

StatusCallback = Callable[[ConcatenationStatus, dict], None]


class ConcatenationEngine:
    """
    Two-tier segment joiner with graceful degradation.

    Usage:
        engine = ConcatenationEngine(FFmpegJoiner())
        outcome = engine.join(segments, output_path, work_dir=store.work_dir)
        if outcome.succeeded:
            print(outcome.artifact.path, outcome.method.value)
    """

    def __init__(self, joiner: SegmentJoinerInterface):
        """
        Args:
            joiner: Primary (stream copy) join strategy
        """
        self.logger = logging.getLogger(__name__)
        self.joiner = joiner

    def join(
        self,
        ordered_segments: Sequence[Segment],
        output_path: Path,
        work_dir: Optional[Path] = None,
        on_status: Optional[StatusCallback] = None,
    ) -> JoinOutcome:
        """
        Join segments into output_path.

        Args:
            ordered_segments: Segments in capture order (empty ones are skipped)
            output_path: Destination file (must not exist)
            work_dir: Session working directory. Holds the manifest, and is
                      removed on success
            on_status: Called with (ConcatenationStatus, details)

        Returns:
            JoinOutcome describing how (or whether) the output was produced

        Raises:
            EmptyRecordingError: If no segment has data
        """
        valid = [segment for segment in ordered_segments if not segment.is_empty]
        skipped = len(ordered_segments) - len(valid)

        if skipped:
            self.logger.warning(f"Skipping {skipped} empty segment(s)")

        if not valid:
            raise EmptyRecordingError("No recorded data to save (all segments empty)")

        output_path = Path(output_path)
        total_bytes = sum(segment.size_bytes for segment in valid)

        self._notify(
            on_status,
            ConcatenationStatus.STARTED,
            {
                "segments": len(valid),
                "skipped": skipped,
                "total_bytes": total_bytes,
                "output_path": str(output_path),
            },
        )
        self.logger.info(
            f"Joining {len(valid)} segment(s) ({format_size(total_bytes)}) into {output_path}",
        )

        if len(valid) == 1:
            method, error = self._copy_single(valid[0], output_path)
        else:
            method, error = self._join_many(valid, output_path, work_dir, on_status)

        if method == JoinMethod.FAILED:
            self._remove_partial_output(output_path)
            if error is not None and work_dir is not None and not isinstance(error, FallbackJoinError):
                error = FallbackJoinError(str(error), work_dir)

            self.logger.error(f"Join failed: {error}")
            self._notify(on_status, ConcatenationStatus.ERROR, {"message": str(error)})
            return JoinOutcome(
                method=JoinMethod.FAILED,
                error=error,
                work_dir_preserved=work_dir is not None,
                skipped_segments=skipped,
            )

        artifact = OutputArtifact(
            path=output_path,
            source_segment_count=len(valid),
            method=method,
        )

        if work_dir is not None:
            remove_directory(work_dir)

        self.logger.info(f"Recording joined ({method.value}): {output_path}")
        self._notify(
            on_status,
            ConcatenationStatus.COMPLETE,
            {"method": method.value, "output_path": str(output_path)},
        )
        return JoinOutcome(method=method, artifact=artifact, skipped_segments=skipped)

    # =========================================================================
    # STRATEGIES
    # =========================================================================

    def _copy_single(self, segment: Segment, output_path: Path):
        try:
            shutil.copyfile(segment.path, output_path)
        except OSError as e:
            return JoinMethod.FAILED, ResourceError(f"Failed to copy recording: {e}")
        return JoinMethod.COPIED_SINGLE, None

    def _join_many(
        self,
        segments: List[Segment],
        output_path: Path,
        work_dir: Optional[Path],
        on_status: Optional[StatusCallback],
    ):
        try:
            self._join_primary(segments, output_path, work_dir, on_status)
            return JoinMethod.JOINED_PRIMARY, None
        except JoinError as e:
            self.logger.warning(f"Primary join failed, falling back to raw concatenation: {e}")

        try:
            self._join_raw(segments, output_path, on_status)
            return JoinMethod.JOINED_FALLBACK, None
        except OSError as e:
            return JoinMethod.FAILED, FallbackJoinError(f"Fallback join failed: {e}", work_dir)

    def _join_primary(
        self,
        segments: List[Segment],
        output_path: Path,
        work_dir: Optional[Path],
        on_status: Optional[StatusCallback],
    ) -> None:
        manifest_dir = work_dir if work_dir is not None else output_path.parent
        manifest_file = manifest_dir / CONCAT_MANIFEST_NAME

        try:
            write_concat_manifest((segment.path for segment in segments), manifest_file)
        except OSError as e:
            raise JoinError(f"Cannot write concat manifest: {e}") from e

        def on_progress(details: dict) -> None:
            self._notify(on_status, ConcatenationStatus.PROGRESS, {"stage": "primary", **details})

        try:
            self.joiner.join(manifest_file, output_path, on_progress=on_progress)
        finally:
            if work_dir is None:
                manifest_file.unlink(missing_ok=True)

    def _join_raw(
        self,
        segments: List[Segment],
        output_path: Path,
        on_status: Optional[StatusCallback],
    ) -> None:
        """
        Append each segment's bytes to output_path, in index order.

        Raises:
            OSError: On any read/write failure
        """
        with open(output_path, "wb") as out:
            for position, segment in enumerate(segments, start=1):
                with open(segment.path, "rb") as src:
                    shutil.copyfileobj(src, out, FALLBACK_COPY_CHUNK_BYTES)
                self._notify(
                    on_status,
                    ConcatenationStatus.PROGRESS,
                    {
                        "stage": "fallback",
                        "segments_joined": position,
                        "segments_total": len(segments),
                    },
                )

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _remove_partial_output(self, output_path: Path) -> None:
        try:
            output_path.unlink(missing_ok=True)
        except OSError as e:
            self.logger.warning(f"Could not remove partial output {output_path}: {e}")

    def _notify(
        self,
        on_status: Optional[StatusCallback],
        status: ConcatenationStatus,
        details: dict,
    ) -> None:
        if on_status:
            try:
                on_status(status, details)
            except Exception as e:
                self.logger.error(f"Error in concatenation status callback: {e}")
