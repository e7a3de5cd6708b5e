"""Inspect and control active sessions.

Control endpoints are async so dashboard writes happen on the event loop.
"""
from fastapi import APIRouter, Depends, HTTPException

from shazam_forever.api.state import AppState, get_state
from shazam_forever.core.orchestrator import RecognitionOrchestrator

router = APIRouter()


def _get_or_404(state: AppState, session_id: str) -> RecognitionOrchestrator:
    orchestrator = state.get_session(session_id)
    if orchestrator is None:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    return orchestrator


@router.get("")
def list_sessions(state: AppState = Depends(get_state)):
    """Return a snapshot of every active session."""
    return {"sessions": [o.snapshot() for o in state.list_sessions()]}


@router.get("/{session_id}")
def get_session(session_id: str, state: AppState = Depends(get_state)):
    """Return listening state, buffer counters and the current song."""
    return _get_or_404(state, session_id).snapshot()


@router.get("/{session_id}/history")
def get_history(session_id: str, state: AppState = Depends(get_state)):
    """Return identified songs, newest first."""
    orchestrator = _get_or_404(state, session_id)
    return {"history": [song.to_dict() for song in orchestrator.history]}


@router.post("/{session_id}/listening/start")
async def start_listening(session_id: str, state: AppState = Depends(get_state)):
    orchestrator = _get_or_404(state, session_id)
    orchestrator.start_listening()
    return {"ok": True, "state": orchestrator.state.value}


@router.post("/{session_id}/listening/stop")
async def stop_listening(session_id: str, state: AppState = Depends(get_state)):
    orchestrator = _get_or_404(state, session_id)
    orchestrator.stop_listening()
    return {"ok": True, "state": orchestrator.state.value}
