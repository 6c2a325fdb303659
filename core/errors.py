"""
Recorder Errors

Exception taxonomy shared by storage, recording and the service layer.

Transient failures (a disk poll that errors, one malformed segment name)
are logged where they happen and never reach these classes. Everything here
is either a rejected command or a failure that ends the session.
"""

from pathlib import Path
from typing import Optional


class RecorderError(Exception):
    """Base class for all recorder errors"""
    pass


class PreconditionError(RecorderError):
    """Bad or missing input to a command (no source selected, etc.)"""
    pass


class AlreadyRecordingError(PreconditionError):
    """start() called while a session is already active"""
    pass


class InvalidTransitionError(RecorderError):
    """Session state machine asked to make a transition it doesn't allow"""
    pass


class ResourceError(RecorderError):
    """Working directory or output I/O failure"""
    pass


class NotFoundError(ResourceError):
    """Working directory vanished unexpectedly (external deletion)"""
    pass


class EmptyRecordingError(RecorderError):
    """No segment with data was captured, nothing to save"""
    pass


class JoinError(RecorderError):
    """
    Primary (stream copy) join failed.

    Never surfaced to the UI - it triggers the raw byte fallback.
    """
    pass


class FallbackJoinError(RecorderError):
    """
    Raw byte fallback failed as well.

    Terminal. The working directory is left on disk so the segments can be
    recovered by hand, and its path is part of the message.
    """

    def __init__(self, message: str, work_dir: Optional[Path] = None):
        if work_dir is not None:
            message = f"{message} (segments kept in {work_dir})"
        super().__init__(message)
        self.work_dir = work_dir
