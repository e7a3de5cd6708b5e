"""Core services: audio batching, recognition, dedupe, dashboard output."""
from shazam_forever.core.accumulator import AudioAccumulator
from shazam_forever.core.orchestrator import RecognitionOrchestrator
from shazam_forever.core.presentation import PresentationAdapter
from shazam_forever.core.recognition_client import RecognitionClient

__all__ = [
    "AudioAccumulator",
    "PresentationAdapter",
    "RecognitionClient",
    "RecognitionOrchestrator",
]
