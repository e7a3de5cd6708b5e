"""Shared fakes: a manual clock for batch timers, a recording dashboard and a scripted recognizer."""
from datetime import datetime, timedelta
from typing import Callable, List

import pytest

from shazam_forever.core.orchestrator import RecognitionOrchestrator
from shazam_forever.core.presentation import PresentationAdapter
from shazam_forever.models.song import SongMatch

BASE_TIME = datetime(2026, 10, 19, 15, 4, 5)


class FakeHandle:
    def __init__(self, when: float, callback: Callable[[], None]) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Stands in for loop.call_later; time only moves on advance()."""

    def __init__(self) -> None:
        self.now = 0.0
        self.handles: List[FakeHandle] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> FakeHandle:
        handle = FakeHandle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> List[FakeHandle]:
        return [h for h in self.handles if not h.cancelled and not h.fired]

    def advance(self, seconds: float) -> None:
        self.now += seconds
        for handle in self.pending:
            if handle.when <= self.now:
                handle.fired = True
                handle.callback()


class RecordingDashboard:
    def __init__(self) -> None:
        self.main: List[str] = []
        self.expanded: List[str] = []

    def write_to_main(self, text: str) -> None:
        self.main.append(text)

    def write_to_expanded(self, text: str) -> None:
        self.expanded.append(text)


class StubRecognizer:
    """Returns (or raises) scripted results in order; None once the script runs out."""

    def __init__(self, *results) -> None:
        self._results = list(results)
        self.calls = []

    async def recognize(self, samples):
        self.calls.append(samples)
        if not self._results:
            return None
        result = self._results.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result


def song(title: str = "X", artist: str = "Y", seconds: float = 0, **kwargs) -> SongMatch:
    return SongMatch(
        title=title,
        artist=artist,
        identified_at=BASE_TIME + timedelta(seconds=seconds),
        **kwargs,
    )


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def dashboard():
    return RecordingDashboard()


@pytest.fixture
def make_orchestrator(scheduler, dashboard):
    def _make(*results) -> RecognitionOrchestrator:
        orchestrator = RecognitionOrchestrator(
            StubRecognizer(*results),
            PresentationAdapter(dashboard),
            session_id="test-session",
            schedule=scheduler,
        )
        return orchestrator

    return _make
