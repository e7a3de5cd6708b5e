"""Data models for recognized songs and session state."""
from shazam_forever.models.session import AudioStats, OrchestratorState
from shazam_forever.models.song import SongMatch

__all__ = [
    "AudioStats",
    "OrchestratorState",
    "SongMatch",
]
