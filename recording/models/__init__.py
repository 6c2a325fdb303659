"""
Recording Models Package
"""

from recording.models.session_models import JoinOutcome, OutputArtifact, RecordingSession

__all__ = [
    "JoinOutcome",
    "OutputArtifact",
    "RecordingSession",
]
