"""Per-session listening state."""
from dataclasses import dataclass
from enum import Enum


class OrchestratorState(str, Enum):
    """Where a session is in the listen / buffer / recognize cycle."""
    IDLE = "idle"
    LISTENING = "listening"
    BUFFERING = "buffering"
    PROCESSING = "processing"


@dataclass
class AudioStats:
    """Counters for the batch currently being buffered."""
    chunk_count: int = 0
    total_bytes: int = 0
