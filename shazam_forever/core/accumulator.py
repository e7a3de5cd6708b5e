"""Buffer streamed audio chunks and fire a batch on a one-shot timer."""
import asyncio
import logging
from typing import Any, Callable, List, Optional

from shazam_forever.config import BATCH_INTERVAL_SEC
from shazam_forever.models.session import AudioStats

logger = logging.getLogger(__name__)

# schedule(delay_sec, callback) -> handle with cancel()
Scheduler = Callable[[float, Callable[[], None]], Any]


def _loop_scheduler(delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
    return asyncio.get_running_loop().call_later(delay, callback)


class AudioAccumulator:
    """Collects chunks while listening and not processing.

    The first chunk accepted into an empty buffer starts a single timer; when it
    expires on_batch_due is called if anything is pending. Chunks offered while
    processing (or not listening) are dropped, not queued.
    """

    def __init__(
        self,
        on_batch_due: Callable[[], None],
        *,
        interval_sec: float = BATCH_INTERVAL_SEC,
        schedule: Optional[Scheduler] = None,
    ) -> None:
        self._on_batch_due = on_batch_due
        self.interval_sec = interval_sec
        self._schedule = schedule or _loop_scheduler
        self.is_listening = False
        self.is_processing = False
        self.pending_chunks: List[bytes] = []
        self.stats = AudioStats()
        self.dropped_chunks = 0
        self._timer_handle: Any = None

    @property
    def batch_timer_active(self) -> bool:
        return self._timer_handle is not None

    @property
    def is_empty(self) -> bool:
        return not self.pending_chunks

    def accept(self, chunk: bytes) -> bool:
        """Buffer chunk. Returns False if it was dropped."""
        if not self.is_listening or self.is_processing:
            self.dropped_chunks += 1
            return False

        self.pending_chunks.append(bytes(chunk))
        self.stats.chunk_count += 1
        self.stats.total_bytes += len(chunk)
        logger.debug(
            "Audio chunk received: %d bytes (total: %d bytes, chunks: %d)",
            len(chunk),
            self.stats.total_bytes,
            self.stats.chunk_count,
        )

        if self._timer_handle is None:
            logger.info("Starting %.0f-second timer for audio processing", self.interval_sec)
            self._timer_handle = self._schedule(self.interval_sec, self._on_timer)
        return True

    def _on_timer(self) -> None:
        self._timer_handle = None
        if not self.pending_chunks:
            return
        self._on_batch_due()

    def combined(self) -> bytes:
        """All pending chunks concatenated in arrival order."""
        return b"".join(self.pending_chunks)

    def cancel_timer(self) -> None:
        if self._timer_handle is not None:
            self._timer_handle.cancel()
            self._timer_handle = None

    def reset(self) -> None:
        """Drop pending audio, zero the counters and clear the timer."""
        self.cancel_timer()
        self.pending_chunks = []
        self.stats = AudioStats()
