"""
Core utilities and modules.

Public API:
    - SessionStateMachine / SessionState: Recording session lifecycle
    - Ticker: Fixed-period background caller
    - Error taxonomy (RecorderError and subclasses)

Usage:
    from core import SessionState, SessionStateMachine

    machine = SessionStateMachine()
    machine.transition_to(SessionState.RECORDING, "user pressed start")
"""

from core.errors import (
    AlreadyRecordingError,
    EmptyRecordingError,
    FallbackJoinError,
    InvalidTransitionError,
    JoinError,
    NotFoundError,
    PreconditionError,
    RecorderError,
    ResourceError,
)
from core.state_machine import SessionState, SessionStateMachine
from core.ticker import Ticker

__all__ = [
    "AlreadyRecordingError",
    "EmptyRecordingError",
    "FallbackJoinError",
    "InvalidTransitionError",
    "JoinError",
    "NotFoundError",
    "PreconditionError",
    "RecorderError",
    "ResourceError",
    "SessionState",
    "SessionStateMachine",
    "Ticker",
]
