"""
Segment Joiner Interface

Abstract interface for the primary (container-aware) join strategy.

The ConcatenationEngine depends on this abstraction, so the real FFmpeg
joiner can be swapped for a fake in tests, and a failing fake can be used
to exercise the raw byte fallback.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Optional

ProgressCallback = Callable[[dict], None]


class SegmentJoinerInterface(ABC):
    """
    Abstract base class for stream copy joiners.
    """

    @abstractmethod
    def join(
        self,
        manifest_file: Path,
        output_file: Path,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        """
        Join the segments listed in manifest_file into output_file.

        Blocks until done; the engine runs it off the controller thread.

        Args:
            manifest_file: Concat list ("file '<path>'" per line, in order)
            output_file: Destination, must not be overwritten if it existed
            on_progress: Called with progress details (dict) while running

        Raises:
            JoinError: For any failure, including the joiner being missing
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if this joiner can run on this machine.
        """
        pass
