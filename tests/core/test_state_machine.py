"""
Session State Machine Tests

To run:
    pytest tests/core/test_state_machine.py -v
"""

import pytest

from core.errors import InvalidTransitionError
from core.state_machine import SessionState, SessionStateMachine


@pytest.fixture
def machine():
    return SessionStateMachine()


@pytest.mark.unit
def test_starts_idle(machine):
    assert machine.get_current_state() == SessionState.IDLE
    assert machine.previous_state is None
    assert machine.is_active() is False


@pytest.mark.unit
def test_full_lifecycle(machine):
    """Test the normal record -> pause -> save path is allowed."""
    for state in (
        SessionState.RECORDING,
        SessionState.PAUSED,
        SessionState.RECORDING,
        SessionState.STOPPING,
        SessionState.FINALIZING,
        SessionState.COMPLETED,
        SessionState.IDLE,
    ):
        machine.transition_to(state)
        assert machine.get_current_state() == state


@pytest.mark.unit
@pytest.mark.parametrize(
    "path",
    [
        [SessionState.PAUSED],
        [SessionState.STOPPING],
        [SessionState.RECORDING, SessionState.FINALIZING],
        [SessionState.RECORDING, SessionState.COMPLETED],
        [SessionState.RECORDING, SessionState.STOPPING, SessionState.RECORDING],
    ],
)
def test_invalid_transitions_rejected(machine, path):
    """Test moves outside the allowed table raise and keep the state."""
    *allowed, illegal = path
    for state in allowed:
        machine.transition_to(state)
    before = machine.get_current_state()

    with pytest.raises(InvalidTransitionError):
        machine.transition_to(illegal)

    assert machine.get_current_state() == before


@pytest.mark.unit
def test_failed_returns_to_idle(machine):
    machine.transition_to(SessionState.FAILED, "start failed")
    assert machine.can_transition(SessionState.RECORDING) is False

    machine.transition_to(SessionState.IDLE)
    assert machine.can_transition(SessionState.RECORDING) is True


@pytest.mark.unit
def test_callback_receives_old_and_new_state(machine):
    changes = []
    machine.register_callback("on_state_change", lambda old, new: changes.append((old, new)))

    machine.transition_to(SessionState.RECORDING)
    machine.transition_to(SessionState.RECORDING)  # same state, no callback

    assert changes == [(SessionState.IDLE, SessionState.RECORDING)]
    assert machine.is_active() is True


@pytest.mark.unit
def test_callback_errors_are_contained(machine):
    def broken(old, new):
        raise RuntimeError("listener bug")

    machine.register_callback("on_state_change", broken)
    machine.transition_to(SessionState.RECORDING)

    assert machine.get_current_state() == SessionState.RECORDING


@pytest.mark.unit
def test_unknown_callback_rejected(machine):
    with pytest.raises(ValueError):
        machine.register_callback("on_explode", lambda: None)


@pytest.mark.unit
def test_status_info(machine):
    machine.transition_to(SessionState.RECORDING)

    info = machine.get_status_info()

    assert info["current_state"] == "recording"
    assert info["previous_state"] == "idle"
    assert info["state_duration"] >= 0
