"""Shared application state (injected into routes): one orchestrator per device session."""
from typing import Dict, List, Optional

from shazam_forever.core.orchestrator import RecognitionOrchestrator
from shazam_forever.core.presentation import Dashboard, PresentationAdapter
from shazam_forever.core.recognition_client import RecognitionClient


class AppState:
    def __init__(self, recognition_client: Optional[RecognitionClient] = None) -> None:
        self._recognition_client = recognition_client
        self._sessions: Dict[str, RecognitionOrchestrator] = {}

    @property
    def recognition_client(self) -> RecognitionClient:
        if self._recognition_client is None:
            self._recognition_client = RecognitionClient()
        return self._recognition_client

    def open_session(self, session_id: str, dashboard: Dashboard) -> RecognitionOrchestrator:
        """Create the orchestrator for a new session, replacing any stale one with the same id."""
        stale = self._sessions.pop(session_id, None)
        if stale is not None:
            stale.close()
        orchestrator = RecognitionOrchestrator(
            self.recognition_client,
            PresentationAdapter(dashboard),
            session_id=session_id,
        )
        self._sessions[session_id] = orchestrator
        return orchestrator

    def close_session(self, session_id: str, orchestrator: RecognitionOrchestrator) -> None:
        orchestrator.close()
        if self._sessions.get(session_id) is orchestrator:
            del self._sessions[session_id]

    def get_session(self, session_id: str) -> Optional[RecognitionOrchestrator]:
        return self._sessions.get(session_id)

    def list_sessions(self) -> List[RecognitionOrchestrator]:
        return list(self._sessions.values())

    def close_all(self) -> None:
        for session_id, orchestrator in list(self._sessions.items()):
            self.close_session(session_id, orchestrator)


_state = AppState()


def get_state() -> AppState:
    return _state
