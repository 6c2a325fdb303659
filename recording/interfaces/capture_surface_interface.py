"""
Capture Surface Interface

Abstract interface for the component that actually captures the screen and
encodes it into segments (a MediaRecorder in a browser window, an FFmpeg
screen grab, a test fake...).

The SessionController depends on this abstraction only. Data flows back
through the controller's push API:

    controller.on_segment(buffer, mime_type, is_final, session_id=session_id)
    controller.on_capture_stopped(session_id=session_id)

session_id is the value passed to start_capture(). Surfaces should hand it
back with everything they push, so late output from a finished session is
never mixed into the next one.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class CaptureSurfaceInterface(ABC):
    """
    Abstract base class for capture surfaces.

    All methods should be NON-BLOCKING: the controller calls them from its
    event worker, and segments pushed back are queued behind the call.
    """

    sink: Optional[Any] = None

    def bind(self, sink: Any) -> None:
        """
        Set where segments are pushed (normally the SessionController).

        The sink must provide on_segment(buffer, mime_type, is_final,
        session_id=None) and on_capture_stopped(session_id=None).
        """
        self.sink = sink

    @abstractmethod
    def start_capture(self, source_id: str, session_id: Optional[str] = None) -> None:
        """
        Begin capturing the given screen/window.

        Args:
            source_id: Opaque capture source identifier chosen by the UI
            session_id: Recording session to tag pushed segments with

        Raises:
            CaptureError: If capture can't start
        """
        pass

    @abstractmethod
    def pause_capture(self) -> None:
        """Stop producing segments until resume_capture()"""
        pass

    @abstractmethod
    def resume_capture(self) -> None:
        """Continue producing segments after a pause"""
        pass

    @abstractmethod
    def request_flush(self) -> None:
        """
        Finish capturing.

        The surface should push its last (possibly partial) segment with
        is_final=True and then call on_capture_stopped(). The controller
        only waits a bounded grace period for this.
        """
        pass

    @abstractmethod
    def is_capturing(self) -> bool:
        pass

    @abstractmethod
    def cleanup(self) -> None:
        """
        Release capture resources. Should never raise.
        """
        pass


class CaptureError(Exception):
    """
    Exception raised by capture surfaces.

    Examples:
    - Source window closed
    - Encoder unavailable
    """
    pass
