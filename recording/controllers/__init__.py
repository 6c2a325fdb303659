"""
Recording Controllers Package

Session lifecycle, duration limit and segment joining.
"""

from recording.controllers.concatenation_engine import ConcatenationEngine
from recording.controllers.duration_guard import DurationGuard
from recording.controllers.session_controller import SessionController

# Public API
__all__ = [
    "ConcatenationEngine",
    "DurationGuard",
    "SessionController",
]
