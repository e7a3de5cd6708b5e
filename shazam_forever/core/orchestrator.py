"""Per-session recognition loop: buffer audio, recognize each batch, dedupe, update the dashboard."""
import asyncio
import logging
from typing import Any, Callable, List, Optional

from shazam_forever.config import (
    BATCH_INTERVAL_SEC,
    DUPLICATE_COOLDOWN_SEC,
    HISTORY_LIMIT,
    UI_REFRESH_EVERY_CHUNKS,
)
from shazam_forever.core.accumulator import AudioAccumulator, Scheduler
from shazam_forever.core.presentation import PresentationAdapter
from shazam_forever.core.sample_converter import convert
from shazam_forever.core.song_cooldown import is_within_cooldown
from shazam_forever.models.session import AudioStats, OrchestratorState
from shazam_forever.models.song import SongMatch

logger = logging.getLogger(__name__)


class RecognitionOrchestrator:
    """Owns the accumulator and recognition client for one device session.

    All methods run on the event loop. At most one batch is in flight; while it
    is, incoming chunks are dropped.
    """

    def __init__(
        self,
        client: Any,
        presenter: PresentationAdapter,
        *,
        session_id: str = "",
        batch_interval_sec: float = BATCH_INTERVAL_SEC,
        cooldown_sec: float = DUPLICATE_COOLDOWN_SEC,
        history_limit: int = HISTORY_LIMIT,
        schedule: Optional[Scheduler] = None,
        converter: Callable[[bytes], Any] = convert,
    ) -> None:
        self.session_id = session_id
        self._client = client
        self._presenter = presenter
        self._cooldown_sec = cooldown_sec
        self._history_limit = history_limit
        self._convert = converter
        self._accumulator = AudioAccumulator(
            self._on_batch_due, interval_sec=batch_interval_sec, schedule=schedule
        )
        self._batch_task: Optional[asyncio.Task] = None
        self.closed = False
        self.current_song: Optional[SongMatch] = None
        self.history: List[SongMatch] = []

    @property
    def is_listening(self) -> bool:
        return self._accumulator.is_listening

    @property
    def is_processing(self) -> bool:
        return self._accumulator.is_processing

    @property
    def batch_timer_active(self) -> bool:
        return self._accumulator.batch_timer_active

    @property
    def pending_chunks(self) -> List[bytes]:
        return self._accumulator.pending_chunks

    @property
    def stats(self) -> AudioStats:
        return self._accumulator.stats

    @property
    def dropped_chunks(self) -> int:
        return self._accumulator.dropped_chunks

    @property
    def state(self) -> OrchestratorState:
        if self.is_processing:
            return OrchestratorState.PROCESSING
        if not self.is_listening:
            return OrchestratorState.IDLE
        if self.batch_timer_active:
            return OrchestratorState.BUFFERING
        return OrchestratorState.LISTENING

    def refresh_display(self) -> None:
        self._presenter.render(self.current_song, self.is_listening)

    def start_listening(self) -> None:
        if self.closed or self.is_listening:
            return
        self._accumulator.is_listening = True
        logger.info("Session %s: starting continuous music listening", self.session_id)
        self.refresh_display()

    def stop_listening(self) -> None:
        """Pause. Buffered audio is discarded; an in-flight batch still completes."""
        if not self.is_listening:
            return
        self._accumulator.is_listening = False
        if not self.is_processing:
            self._accumulator.reset()
        logger.info("Session %s: listening paused", self.session_id)
        self.refresh_display()

    def handle_audio_chunk(self, chunk: bytes) -> None:
        if not self._accumulator.accept(chunk):
            return
        if self.stats.chunk_count % UI_REFRESH_EVERY_CHUNKS == 0:
            self.refresh_display()

    def handle_battery(self, level: Optional[int], charging: bool = False) -> None:
        logger.info("Glasses battery: %s%%%s", level, " (charging)" if charging else "")

    def handle_dashboard_mode(self, mode: str) -> None:
        logger.info("Dashboard mode changed to: %s", mode)
        self.refresh_display()

    def _on_batch_due(self) -> None:
        if self._batch_task is not None and not self._batch_task.done():
            return
        self._batch_task = asyncio.get_running_loop().create_task(self.process_batch())

    async def process_batch(self) -> None:
        """Recognize everything buffered so far, then return to listening.

        Any error is logged and treated as "no match".
        """
        if self.is_processing:
            return
        if self._accumulator.is_empty:
            self._accumulator.cancel_timer()
            return

        self._accumulator.is_processing = True
        self._accumulator.cancel_timer()
        logger.info(
            "Processing %d audio chunks (%d total bytes)",
            self.stats.chunk_count,
            self.stats.total_bytes,
        )
        self.refresh_display()

        try:
            samples = self._convert(self._accumulator.combined())
            logger.debug("Converted to %d PCM samples", len(samples))
            song = await self._client.recognize(samples)
            if song is None:
                logger.info("No song identified in this sample")
            else:
                self.handle_song_identified(song)
        except Exception:
            logger.exception("Error processing audio chunks")
        finally:
            self._accumulator.reset()
            self._accumulator.is_processing = False
            self.refresh_display()

    def handle_song_identified(self, song: SongMatch) -> bool:
        """Record song unless it repeats the current one within the cooldown. Returns True if recorded."""
        if is_within_cooldown(self.current_song, song, self._cooldown_sec):
            logger.info("Duplicate song detected, skipping: %s by %s", song.title, song.artist)
            return False

        self.current_song = song
        self.history.insert(0, song)
        del self.history[self._history_limit:]
        logger.info("Song history updated (%d songs)", len(self.history))
        self.refresh_display()
        return True

    async def join(self) -> None:
        """Wait for the in-flight batch, if any."""
        task = self._batch_task
        if task is not None and not task.done():
            await task

    def close(self) -> None:
        """Stop accepting audio and cancel the pending timer. An in-flight batch is left to finish."""
        self.closed = True
        self._accumulator.is_listening = False
        if not self.is_processing:
            self._accumulator.reset()

    def snapshot(self) -> dict:
        return {
            "session_id": self.session_id,
            "state": self.state.value,
            "is_listening": self.is_listening,
            "is_processing": self.is_processing,
            "chunk_count": self.stats.chunk_count,
            "total_bytes": self.stats.total_bytes,
            "dropped_chunks": self.dropped_chunks,
            "current_song": self.current_song.to_dict() if self.current_song else None,
            "history_size": len(self.history),
        }
