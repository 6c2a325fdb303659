"""
Session Controller

Owns the single active recording session, from start() to a saved file.
Wires the segment store, disk space monitor, duration guard and
concatenation engine together and reports lifecycle events to the UI.

Concurrency model:
- One event queue, one worker thread. User commands, segment arrivals,
  duration ticks, disk readings, grace timeouts and join results are all
  posted as events; only the worker touches session state.
- Commands (start/pause/resume/stop) wait for the worker's answer, so
  errors like AlreadyRecordingError reach the caller.
- The join runs on its own thread and posts its result back as an event,
  so a long join never blocks new events.

State flow:
    IDLE -> RECORDING <-> PAUSED -> STOPPING -> FINALIZING -> COMPLETED -> IDLE
                                                          \\-> FAILED ----/
"""

import logging
import queue
import shutil
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from config.settings import DURATION_TICK_INTERVAL
from core.errors import (
    AlreadyRecordingError,
    EmptyRecordingError,
    NotFoundError,
    PreconditionError,
    RecorderError,
    ResourceError,
)
from core.state_machine import ACTIVE_STATES, SessionState, SessionStateMachine
from recording.config import RecorderConfig
from recording.constants import ConcatenationStatus, JoinMethod, format_duration
from recording.controllers.concatenation_engine import ConcatenationEngine
from recording.controllers.duration_guard import DurationGuard
from recording.interfaces.capture_surface_interface import (
    CaptureError,
    CaptureSurfaceInterface,
)
from recording.interfaces.segment_joiner_interface import SegmentJoinerInterface
from recording.models.session_models import JoinOutcome, OutputArtifact, RecordingSession
from recording.utils.recording_utils import generate_output_path
from storage.managers.segment_store import SegmentStore
from storage.managers.space_manager import DiskSpaceMonitor
from storage.models.segment import DiskSpaceReading, Segment
from storage.utils.path_utils import calculate_directory_size

# How long a command waits for the worker to answer
COMMAND_TIMEOUT = 10.0

# Segments may still land while the capture surface flushes its tail
ACCEPTING_SEGMENTS = ACTIVE_STATES | {SessionState.STOPPING}


class EventType(Enum):
    START = "start"
    PAUSE = "pause"
    RESUME = "resume"
    STOP = "stop"
    SEGMENT = "segment"
    CAPTURE_STOPPED = "capture_stopped"
    DURATION_TICK = "duration_tick"
    LIMIT_REACHED = "limit_reached"
    DISK_READING = "disk_reading"
    FLUSH_TIMEOUT = "flush_timeout"
    JOIN_FINISHED = "join_finished"
    CHANGE_SAVE_PATH = "change_save_path"
    SHUTDOWN = "shutdown"


@dataclass
class _Event:
    kind: EventType
    payload: Dict[str, Any] = field(default_factory=dict)
    # Timer/monitor/join events carry the session they belong to, so stale
    # ones from a finished session are dropped. Capture events carry it when
    # the surface tags them
    session_id: Optional[str] = None
    reply: Optional[Future] = None


class SessionController:
    """
    State machine and event loop for one recording at a time.

    Notifications (at most one listener each, all optional):
        on_state_changed(is_recording: bool, is_paused: bool)
        on_disk_space(status: str, free_bytes: int)          # every poll
        on_concatenation_status(status: str, details: dict)
        on_limit_reached()
        on_recording_saved(path: str)
        on_recording_error(message: str)

    Usage:
        controller = SessionController(RecorderConfig(), FFmpegJoiner(), capture)
        controller.on_recording_saved = lambda path: print("Saved", path)

        controller.start("screen:0")
        ...
        controller.stop()
        controller.wait_for_idle(timeout=60)
        controller.shutdown()
    """

    def __init__(
        self,
        config: RecorderConfig,
        joiner: SegmentJoinerInterface,
        capture: Optional[CaptureSurfaceInterface] = None,
        usage_fn: Callable = shutil.disk_usage,
        tick_interval: float = DURATION_TICK_INTERVAL,
    ):
        """
        Initialize session controller and start its event worker.

        Args:
            config: Recorder configuration (save path, limits, thresholds)
            joiner: Primary join strategy for multi-segment recordings
            capture: Capture surface pushing segments (None = caller pushes)
            usage_fn: shutil.disk_usage compatible function
            tick_interval: Seconds per duration tick (1.0 in production)
        """
        self.logger = logging.getLogger(__name__)
        self.config = config
        self.capture = capture

        self.state_machine = SessionStateMachine()
        self.state_machine.register_callback("on_state_change", self._on_state_change)

        self.engine = ConcatenationEngine(joiner)
        self.monitor = DiskSpaceMonitor(
            critical_bytes=config.disk_critical_bytes,
            low_bytes=config.disk_low_bytes,
            usage_fn=usage_fn,
        )
        self.guard = DurationGuard(
            on_limit_reached=self._on_limit_signal,
            tick_interval=tick_interval,
            dispatch=self._dispatch_tick,
        )

        # Session state (worker thread only)
        self._session: Optional[RecordingSession] = None
        self._store: Optional[SegmentStore] = None
        self._grace_timer: Optional[threading.Timer] = None
        self._join_thread: Optional[threading.Thread] = None
        self._ui_state = (False, False)

        # Session whose capture was started and has not confirmed it stopped,
        # and an earlier one that never confirmed (owns the next untagged signal)
        self._capture_session: Optional[str] = None
        self._stale_capture: Optional[str] = None

        # Result of the last finished session
        self.last_artifact: Optional[OutputArtifact] = None
        self.last_error: Optional[str] = None
        self.last_preserved_dir: Optional[Path] = None

        # Callbacks for UI notifications
        self.on_state_changed: Optional[Callable[[bool, bool], None]] = None
        self.on_disk_space: Optional[Callable[[str, int], None]] = None
        self.on_concatenation_status: Optional[Callable[[str, dict], None]] = None
        self.on_limit_reached: Optional[Callable[[], None]] = None
        self.on_recording_saved: Optional[Callable[[str], None]] = None
        self.on_recording_error: Optional[Callable[[str], None]] = None

        # Event loop
        self._events: "queue.Queue[_Event]" = queue.Queue()
        self._idle_event = threading.Event()
        self._idle_event.set()
        self._running = True
        self._worker = threading.Thread(
            target=self._event_loop,
            daemon=True,
            name="SessionController-events",
        )
        self._worker.start()

        if self.capture is not None:
            self.capture.bind(self)

        self.logger.info("Session Controller initialized")

    # =========================================================================
    # UI COMMANDS
    # =========================================================================

    def start(self, source_id: str) -> RecordingSession:
        """
        Start a new recording session.

        Args:
            source_id: Capture source chosen by the UI

        Returns:
            The new RecordingSession

        Raises:
            PreconditionError: If no source is given
            AlreadyRecordingError: If a session is already active
            ResourceError: If the working directory or capture can't start
        """
        return self._submit(EventType.START, {"source_id": source_id}, wait=True)

    def pause(self) -> bool:
        """Pause recording. Returns False if nothing changed."""
        return bool(self._submit(EventType.PAUSE, wait=True))

    def resume(self) -> bool:
        """Resume a paused recording. Returns False if nothing changed."""
        return bool(self._submit(EventType.RESUME, wait=True))

    def stop(self) -> bool:
        """
        Stop recording and save it. Finalization continues in the background.

        Returns:
            True if a stop sequence began, False if there was nothing to stop
            (idle, or already stopping/finalizing)
        """
        return bool(self._submit(EventType.STOP, {"reason": "user request"}, wait=True))

    def change_save_path(self, path: Path) -> None:
        """
        Change where future recordings are saved.

        A session that is already running keeps the path it started with.
        """
        self._submit(EventType.CHANGE_SAVE_PATH, {"path": path}, wait=True)

    def current_settings(self) -> Dict[str, str]:
        return {"save_path": str(self.config.save_root)}

    # =========================================================================
    # CAPTURE SURFACE PUSH API
    # =========================================================================

    def on_segment(
        self,
        buffer: bytes,
        mime_type: Optional[str] = None,
        is_final: bool = False,
        session_id: Optional[str] = None,
    ) -> None:
        """
        Queue one captured segment. Never blocks on disk I/O.

        Surfaces pass back the session_id they were started with, so a late
        segment from a finished session is never written into the next one.
        Untagged segments belong to the current session.
        """
        self._submit(
            EventType.SEGMENT,
            {"buffer": buffer, "mime_type": mime_type, "is_final": is_final},
            session_id=session_id,
        )

    def on_capture_stopped(self, session_id: Optional[str] = None) -> None:
        """
        Capture surface is done: no more segments are coming.

        An untagged signal belongs to the oldest capture that has not
        confirmed stopping yet, which may be a finished session's.
        """
        self._submit(EventType.CAPTURE_STOPPED, session_id=session_id)

    # =========================================================================
    # QUERIES
    # =========================================================================

    @property
    def state(self) -> SessionState:
        return self.state_machine.get_current_state()

    @property
    def session(self) -> Optional[RecordingSession]:
        return self._session

    def is_recording(self) -> bool:
        return self.state in ACTIVE_STATES

    def is_paused(self) -> bool:
        return self.state == SessionState.PAUSED

    def wait_for_idle(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the controller is back in IDLE.

        Returns:
            True if idle, False on timeout
        """
        return self._idle_event.wait(timeout)

    def get_status(self) -> Dict[str, Any]:
        """
        Get complete controller status.
        """
        session = self._session
        status: Dict[str, Any] = {
            "state": self.state.value,
            "is_recording": self.is_recording(),
            "is_paused": self.is_paused(),
            "save_path": str(self.config.save_root),
            "session": session.to_dict() if session else None,
            "elapsed": format_duration(session.active_seconds) if session else None,
            "disk_space": (
                self.monitor.last_reading.status.value if self.monitor.last_reading else None
            ),
            "last_saved": str(self.last_artifact.path) if self.last_artifact else None,
            "last_error": self.last_error,
        }
        if session and session.work_dir.exists():
            status["work_dir_bytes"] = calculate_directory_size(session.work_dir)
        return status

    def shutdown(self, timeout: float = 30.0) -> None:
        """
        Stop any active recording, wait for it to be saved, stop the worker.

        Always call this when done with the controller!
        """
        if not self._running:
            return

        self.logger.info("Shutting down Session Controller")

        if self.is_recording():
            self.stop()
        if not self.wait_for_idle(timeout):
            self.logger.warning("Session still finalizing at shutdown")

        self._submit(EventType.SHUTDOWN, wait=True)
        self._running = False
        self._worker.join(timeout=2.0)

        self._cancel_grace_timer()
        self.monitor.stop()
        self.guard.stop()
        if self.capture is not None:
            self.capture.cleanup()

        self.logger.info("Session Controller shutdown complete")

    # =========================================================================
    # EVENT LOOP
    # =========================================================================

    def _submit(
        self,
        kind: EventType,
        payload: Optional[Dict[str, Any]] = None,
        session_id: Optional[str] = None,
        wait: bool = False,
    ) -> Any:
        if not self._running:
            raise RuntimeError("Session controller is shut down")

        event = _Event(kind, payload or {}, session_id)

        # A listener running on the worker can't wait for the worker
        if not wait or threading.current_thread() is self._worker:
            self._events.put(event)
            return None

        event.reply = Future()
        self._events.put(event)
        return event.reply.result(timeout=COMMAND_TIMEOUT)

    def _event_loop(self) -> None:
        handlers = {
            EventType.START: self._handle_start,
            EventType.PAUSE: self._handle_pause,
            EventType.RESUME: self._handle_resume,
            EventType.STOP: self._handle_stop,
            EventType.SEGMENT: self._handle_segment,
            EventType.CAPTURE_STOPPED: self._handle_capture_stopped,
            EventType.DURATION_TICK: self._handle_duration_tick,
            EventType.LIMIT_REACHED: self._handle_limit_reached,
            EventType.DISK_READING: self._handle_disk_reading,
            EventType.FLUSH_TIMEOUT: self._handle_flush_timeout,
            EventType.JOIN_FINISHED: self._handle_join_finished,
            EventType.CHANGE_SAVE_PATH: self._handle_change_save_path,
        }

        while True:
            event = self._events.get()

            if event.kind == EventType.SHUTDOWN:
                if event.reply:
                    event.reply.set_result(None)
                break

            try:
                result = handlers[event.kind](event)
                if event.reply:
                    event.reply.set_result(result)
            except Exception as e:
                if event.reply:
                    event.reply.set_exception(e)
                else:
                    self.logger.error(f"Error handling {event.kind.value} event: {e}", exc_info=True)

        self.logger.debug("Event loop exited")

    def _is_current(self, event: _Event) -> bool:
        return self._session is not None and event.session_id == self._session.id

    # =========================================================================
    # COMMAND HANDLERS
    # =========================================================================

    def _handle_start(self, event: _Event) -> RecordingSession:
        source_id = event.payload.get("source_id")
        if not source_id or not str(source_id).strip():
            raise PreconditionError("Please select a source first.")

        if self.state != SessionState.IDLE:
            raise AlreadyRecordingError(f"Cannot start - session in state: {self.state.value}")

        # Settings are read once; later changes apply to the next session
        save_root = self.config.save_root
        limit = self.config.max_recording_duration

        store = SegmentStore()
        try:
            work_dir = store.create(self.config.temp_root)
        except ResourceError as e:
            self._fail_start(e)
            raise

        session = RecordingSession(
            source_id=source_id,
            work_dir=work_dir,
            save_root=save_root,
            output_label=self.config.output_label,
        )

        if self.capture is not None:
            try:
                self.capture.start_capture(source_id, session_id=session.id)
            except CaptureError as e:
                store.dispose()
                error = ResourceError(f"Capture failed to start: {e}")
                self._fail_start(error)
                raise error from e

            if self._capture_session is not None:
                self.logger.warning(
                    f"Capture for session {self._capture_session} never confirmed it stopped",
                )
                self._stale_capture = self._capture_session
            self._capture_session = session.id

        self._session = session
        self._store = store
        self.last_artifact = None
        self.last_error = None
        self.last_preserved_dir = None

        self._set_state(SessionState.RECORDING, f"source {source_id}")

        self.guard.start(limit_seconds=limit)
        self.monitor.start(
            save_root,
            interval=self.config.disk_poll_interval,
            on_reading=self._make_reading_handler(session.id),
        )

        self.logger.info(
            f"Recording session {session.id} started "
            f"(limit: {format_duration(limit)}, save to: {save_root})",
        )
        return session

    def _handle_pause(self, event: _Event) -> bool:
        if self.state == SessionState.PAUSED:
            self.logger.debug("Already paused")
            return False
        if self.state != SessionState.RECORDING:
            self.logger.info(f"Pause ignored in state: {self.state.value}")
            return False

        self._set_state(SessionState.PAUSED, "user request")
        self.guard.pause()
        self._call_capture("pause_capture")
        return True

    def _handle_resume(self, event: _Event) -> bool:
        if self.state == SessionState.RECORDING:
            self.logger.debug("Already recording")
            return False
        if self.state != SessionState.PAUSED:
            self.logger.info(f"Resume ignored in state: {self.state.value}")
            return False

        self._set_state(SessionState.RECORDING, "user request")
        self.guard.resume()
        self._call_capture("resume_capture")
        return True

    def _handle_stop(self, event: _Event) -> bool:
        return self._begin_stop(event.payload.get("reason", "user request"))

    def _handle_change_save_path(self, event: _Event) -> None:
        path = event.payload.get("path")
        if not path or not str(path).strip():
            raise PreconditionError("Save path cannot be empty")

        self.config.set("save_root", str(Path(path).expanduser()))
        self.logger.info(f"Save path changed to: {path}")

    # =========================================================================
    # CAPTURE / TIMER / MONITOR HANDLERS
    # =========================================================================

    def _handle_segment(self, event: _Event) -> None:
        if self._session is None or self.state not in ACCEPTING_SEGMENTS:
            self.logger.warning(f"Discarding segment received in state: {self.state.value}")
            return
        if event.session_id is not None and not self._is_current(event):
            self.logger.warning(f"Discarding late segment from session {event.session_id}")
            return

        assert self._store is not None
        try:
            segment = self._store.write(event.payload["buffer"], event.payload.get("mime_type"))
        except ResourceError as e:
            self.logger.error(f"Failed to save segment: {e}")
            self._trigger(self.on_recording_error, "recording error", f"Failed to save segment: {e}")
            return

        if segment is not None:
            self._session.segments.append(segment)

        if event.payload.get("is_final"):
            self.logger.info("Final segment received from capture surface")
            if self.state == SessionState.STOPPING:
                self._begin_finalize()

    def _handle_capture_stopped(self, event: _Event) -> None:
        owner = event.session_id or self._stale_capture or self._capture_session
        if owner is None and self.capture is None and self._session is not None:
            owner = self._session.id
        if owner == self._stale_capture:
            self._stale_capture = None
        if owner == self._capture_session:
            self._capture_session = None

        if self._session is None or owner != self._session.id:
            self.logger.info(f"Capture stopped signal for finished session {owner} ignored")
            return

        if self.state == SessionState.STOPPING:
            self._begin_finalize()
        elif self.state in ACTIVE_STATES:
            # Source went away (window closed) - save what we have
            self.logger.warning("Capture surface stopped on its own, saving recording")
            self._begin_stop("capture stopped", flush=False)
        else:
            self.logger.debug(f"Capture stopped signal ignored in state: {self.state.value}")

    def _handle_flush_timeout(self, event: _Event) -> None:
        if self.state == SessionState.STOPPING and self._is_current(event):
            self.logger.warning(
                f"Capture surface didn't confirm flush within "
                f"{self.config.flush_grace_seconds:.1f}s, finalizing anyway",
            )
            self._begin_finalize()

    def _handle_duration_tick(self, event: _Event) -> None:
        if not self._is_current(event) or self.state not in ACTIVE_STATES:
            return

        assert self._session is not None
        self.guard.tick()
        self._session.active_seconds = self.guard.elapsed_seconds

    def _handle_limit_reached(self, event: _Event) -> None:
        if not self._is_current(event) or self.state not in ACTIVE_STATES:
            self.logger.debug("Limit signal ignored (session already stopping)")
            return

        self.logger.info("Recording limit reached, stopping")
        self._trigger(self.on_limit_reached, "limit reached")
        self._begin_stop("duration limit reached")

    def _handle_disk_reading(self, event: _Event) -> None:
        if not self._is_current(event):
            return

        reading: DiskSpaceReading = event.payload["reading"]
        self._trigger(self.on_disk_space, "disk space", reading.status.value, reading.free_bytes)

        if not reading.is_critical:
            return

        if self.state in ACTIVE_STATES:
            self.logger.error("Disk space critical, stopping recording")
            self._begin_stop("disk space critical")
        elif self.state == SessionState.FINALIZING:
            # Segments are already captured, aborting the join would lose them
            self.logger.warning("Disk space critical during finalization, continuing join")

    def _handle_join_finished(self, event: _Event) -> None:
        if not self._is_current(event) or self.state != SessionState.FINALIZING:
            self.logger.warning("Join result for an unknown session ignored")
            return

        outcome: JoinOutcome = event.payload["outcome"]
        self._join_thread = None

        if outcome.succeeded:
            assert outcome.artifact is not None
            self.last_artifact = outcome.artifact
            self._set_state(SessionState.COMPLETED, outcome.method.value)
            self._trigger(self.on_recording_saved, "recording saved", str(outcome.artifact.path))
            self._reset_to_idle()
            return

        preserved = self._session.work_dir if (self._session and outcome.work_dir_preserved) else None
        self._finish_failed(outcome.error or RecorderError("Unknown join failure"), preserved)

    # =========================================================================
    # STOP / FINALIZE SEQUENCE
    # =========================================================================

    def _begin_stop(self, reason: str, flush: bool = True) -> bool:
        if self.state in (SessionState.STOPPING, SessionState.FINALIZING):
            self.logger.debug(f"Stop ignored, already {self.state.value}")
            return False
        if self.state not in ACTIVE_STATES:
            self.logger.warning(f"Cannot stop - not recording (state: {self.state.value})")
            return False

        self._set_state(SessionState.STOPPING, reason)

        # No more limit/critical signals from here on
        self.monitor.stop()
        self.guard.stop()

        if self.capture is None or not flush:
            self._begin_finalize()
            return True

        assert self._session is not None
        session_id = self._session.id
        self._grace_timer = threading.Timer(
            self.config.flush_grace_seconds,
            lambda: self._submit_if_running(EventType.FLUSH_TIMEOUT, session_id),
        )
        self._grace_timer.daemon = True
        self._grace_timer.start()

        self._call_capture("request_flush")
        return True

    def _begin_finalize(self) -> None:
        self._cancel_grace_timer()

        session = self._session
        store = self._store
        assert session is not None and store is not None

        self._set_state(SessionState.FINALIZING, f"{session.segment_count} segment(s)")

        try:
            segments = store.list()
        except NotFoundError as e:
            self._finish_failed(e, preserved_dir=None)
            return

        valid = [segment for segment in segments if not segment.is_empty]
        empty = len(segments) - len(valid)
        if empty:
            self.logger.warning(f"{empty} empty segment(s) will be skipped")

        if not valid:
            store.dispose()
            self._finish_failed(
                EmptyRecordingError("Nothing was recorded (no segment contained data)"),
                preserved_dir=None,
            )
            return

        try:
            output_path = generate_output_path(
                session.save_root,
                label=session.output_label,
                extension=valid[0].extension,
            )
        except ResourceError as e:
            self._finish_failed(e, preserved_dir=session.work_dir)
            return

        self._join_thread = threading.Thread(
            target=self._join_worker,
            args=(session.id, segments, output_path, session.work_dir),
            daemon=True,
            name="SessionController-join",
        )
        self._join_thread.start()

    def _join_worker(
        self,
        session_id: str,
        segments: List[Segment],
        output_path: Path,
        work_dir: Path,
    ) -> None:
        """Runs off the event worker. Reports back through the queue."""
        try:
            outcome = self.engine.join(
                segments,
                output_path,
                work_dir=work_dir,
                on_status=self._emit_concatenation_status,
            )
        except EmptyRecordingError as e:
            outcome = JoinOutcome(method=JoinMethod.FAILED, error=e)
        except Exception as e:
            self.logger.error(f"Unexpected join failure: {e}", exc_info=True)
            outcome = JoinOutcome(method=JoinMethod.FAILED, error=e, work_dir_preserved=True)

        self._submit_if_running(EventType.JOIN_FINISHED, session_id, {"outcome": outcome})

    def _finish_failed(self, error: Exception, preserved_dir: Optional[Path]) -> None:
        message = str(error)
        if preserved_dir is not None and str(preserved_dir) not in message:
            message = f"{message} (segments kept in {preserved_dir})"

        self.last_error = message
        self.last_preserved_dir = preserved_dir

        mode = "preserved" if preserved_dir else "cleaned"
        self._set_state(SessionState.FAILED, f"{mode}: {message}")
        self._trigger(self.on_recording_error, "recording error", message)
        self._reset_to_idle()

    def _fail_start(self, error: Exception) -> None:
        self.last_error = str(error)
        self._set_state(SessionState.FAILED, f"start failed: {error}")
        self._trigger(self.on_recording_error, "recording error", str(error))
        self._reset_to_idle()

    def _reset_to_idle(self) -> None:
        if self._session is not None:
            self._session.state = self.state
        self._session = None
        self._store = None
        self._set_state(SessionState.IDLE, "ready for next recording")

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _set_state(self, new_state: SessionState, reason: str = "") -> None:
        self.state_machine.transition_to(new_state, reason)
        if self._session is not None:
            self._session.state = new_state

    def _on_state_change(self, old_state: SessionState, new_state: SessionState) -> None:
        if new_state == SessionState.IDLE:
            self._idle_event.set()
        elif old_state == SessionState.IDLE:
            self._idle_event.clear()

        ui_state = (new_state in ACTIVE_STATES, new_state == SessionState.PAUSED)
        if ui_state != self._ui_state:
            self._ui_state = ui_state
            self._trigger(self.on_state_changed, "state changed", *ui_state)

    def _dispatch_tick(self, tick: Callable[[], None]) -> None:
        # The guard's own tick() runs on the worker when the event is handled
        session = self._session
        if session is not None:
            self._submit_if_running(EventType.DURATION_TICK, session.id)

    def _on_limit_signal(self) -> None:
        session = self._session
        if session is not None:
            self._submit_if_running(EventType.LIMIT_REACHED, session.id)

    def _make_reading_handler(self, session_id: str) -> Callable[[DiskSpaceReading], None]:
        def handle(reading: DiskSpaceReading) -> None:
            self._submit_if_running(EventType.DISK_READING, session_id, {"reading": reading})

        return handle

    def _submit_if_running(
        self,
        kind: EventType,
        session_id: Optional[str],
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        # Timers may fire after shutdown; there's nobody left to tell
        if self._running:
            self._submit(kind, payload, session_id=session_id)

    def _emit_concatenation_status(self, status: ConcatenationStatus, details: dict) -> None:
        self._trigger(self.on_concatenation_status, "concatenation status", status.value, details)

    def _cancel_grace_timer(self) -> None:
        if self._grace_timer is not None:
            self._grace_timer.cancel()
            self._grace_timer = None

    def _call_capture(self, method_name: str) -> None:
        if self.capture is None:
            return
        try:
            getattr(self.capture, method_name)()
        except Exception as e:
            self.logger.error(f"Capture surface {method_name} failed: {e}")

    def _trigger(self, callback: Optional[Callable], label: str, *args) -> None:
        """Call a UI listener; its errors are logged, never propagated"""
        if callback:
            try:
                callback(*args)
            except Exception as e:
                self.logger.error(f"Error in {label} callback: {e}")
