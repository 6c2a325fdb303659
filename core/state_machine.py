import logging
import time
from enum import Enum
from typing import Callable, Dict, Optional

from core.errors import InvalidTransitionError


class SessionState(Enum):
    IDLE = "idle"
    RECORDING = "recording"
    PAUSED = "paused"
    STOPPING = "stopping"
    FINALIZING = "finalizing"
    COMPLETED = "completed"
    FAILED = "failed"


# Legal moves. COMPLETED/FAILED only ever go back to IDLE.
ALLOWED_TRANSITIONS = {
    SessionState.IDLE: {SessionState.RECORDING, SessionState.FAILED},
    SessionState.RECORDING: {SessionState.PAUSED, SessionState.STOPPING},
    SessionState.PAUSED: {SessionState.RECORDING, SessionState.STOPPING},
    SessionState.STOPPING: {SessionState.FINALIZING, SessionState.FAILED},
    SessionState.FINALIZING: {SessionState.COMPLETED, SessionState.FAILED},
    SessionState.COMPLETED: {SessionState.IDLE},
    SessionState.FAILED: {SessionState.IDLE},
}

ACTIVE_STATES = frozenset({SessionState.RECORDING, SessionState.PAUSED})


class SessionStateMachine:
    """
    State machine for a single recording session.
    Validates transitions and notifies a listener on every change.

    Not thread safe on its own: the SessionController only touches it from
    its event worker.
    """

    def __init__(self):
        self.current_state = SessionState.IDLE
        self.previous_state: Optional[SessionState] = None
        self.state_start_time = time.time()
        self.logger = logging.getLogger(__name__)

        self.callbacks: Dict[str, Optional[Callable]] = {
            "on_state_change": None,  # Called with (old_state, new_state)
        }

        self.logger.info("Session state machine initialized in IDLE state")

    def register_callback(self, callback_name: str, callback_func: Callable):
        """Register a callback function for state machine events"""
        if callback_name in self.callbacks:
            self.callbacks[callback_name] = callback_func
            self.logger.debug(f"Registered callback: {callback_name}")
        else:
            raise ValueError(f"Unknown callback: {callback_name}")

    def get_current_state(self) -> SessionState:
        """Get the current session state"""
        return self.current_state

    def get_state_duration(self) -> float:
        """Get how long we've been in the current state (seconds)"""
        return time.time() - self.state_start_time

    def can_transition(self, new_state: SessionState) -> bool:
        return new_state in ALLOWED_TRANSITIONS[self.current_state]

    def is_active(self) -> bool:
        """True while segments may still be captured (recording or paused)"""
        return self.current_state in ACTIVE_STATES

    def transition_to(self, new_state: SessionState, reason: str = ""):
        """
        Transition to a new state with logging and callback notification

        Raises:
            InvalidTransitionError: If the move isn't in ALLOWED_TRANSITIONS
        """
        if new_state == self.current_state:
            self.logger.debug(f"Already in state {new_state.value}")
            return

        if not self.can_transition(new_state):
            raise InvalidTransitionError(
                f"Cannot go from {self.current_state.value} to {new_state.value}",
            )

        old_state = self.current_state
        self.previous_state = old_state
        self.current_state = new_state
        self.state_start_time = time.time()

        log_msg = f"State transition: {old_state.value} -> {new_state.value}"
        if reason:
            log_msg += f" ({reason})"
        self.logger.info(log_msg)

        # Notify listener of state change
        if self.callbacks["on_state_change"]:
            try:
                self.callbacks["on_state_change"](old_state, new_state)
            except Exception as e:
                self.logger.error(f"Error in state change callback: {e}")

    def get_status_info(self) -> Dict:
        """Get detailed status information for debugging/monitoring"""
        return {
            "current_state": self.current_state.value,
            "previous_state": (
                self.previous_state.value if self.previous_state else None
            ),
            "state_duration": self.get_state_duration(),
        }
