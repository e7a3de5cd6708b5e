"""Device session socket: audio chunks and device events in, dashboard writes out."""
import asyncio
import contextlib
import logging
from typing import Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from pydantic import BaseModel, ValidationError

from shazam_forever.api.state import AppState, get_state
from shazam_forever.core.orchestrator import RecognitionOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


class DeviceEvent(BaseModel):
    """Non-audio message from the glasses bridge."""
    type: str
    level: Optional[int] = None
    charging: bool = False
    mode: Optional[str] = None
    enabled: Optional[bool] = None


class WebSocketDashboard:
    """Dashboard that queues writes and sends them in order from a single task."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue = asyncio.Queue()
        self.closed = False

    def _put(self, target: str, text: str) -> None:
        if self.closed:
            return
        self._queue.put_nowait({"type": "dashboard", "target": target, "text": text})

    def write_to_main(self, text: str) -> None:
        self._put("main", text)

    def write_to_expanded(self, text: str) -> None:
        self._put("expanded", text)

    async def pump(self, websocket: WebSocket) -> None:
        """Send queued writes until the socket goes away; later writes are discarded."""
        try:
            while True:
                message = await self._queue.get()
                await websocket.send_json(message)
        except (WebSocketDisconnect, RuntimeError) as e:
            logger.debug("Dashboard writer stopped: %s", e)
        finally:
            self.closed = True


def handle_device_event(orchestrator: RecognitionOrchestrator, raw: str) -> None:
    """Apply one JSON device event. Malformed or unknown events are logged and ignored."""
    try:
        event = DeviceEvent.model_validate_json(raw)
    except ValidationError as e:
        logger.warning("Session %s: ignoring malformed event: %s", orchestrator.session_id, e)
        return

    if event.type == "battery":
        orchestrator.handle_battery(event.level, event.charging)
    elif event.type == "dashboard_mode":
        orchestrator.handle_dashboard_mode(event.mode or "")
    elif event.type == "listening":
        if event.enabled is False:
            orchestrator.stop_listening()
        else:
            orchestrator.start_listening()
    else:
        logger.debug("Session %s: unhandled event type %s", orchestrator.session_id, event.type)


@router.websocket("/session/{session_id}")
async def device_session(
    websocket: WebSocket,
    session_id: str,
    user_id: str = "anonymous",
    api_key: Optional[str] = None,
    state: AppState = Depends(get_state),
):
    settings = getattr(websocket.app.state, "settings", None)
    key = websocket.headers.get("x-api-key") or api_key
    if settings is None or key != settings.api_key:
        logger.warning("Rejected session %s: bad or missing API key", session_id)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    logger.info("New session started: %s for user: %s", session_id, user_id)

    dashboard = WebSocketDashboard()
    writer = asyncio.create_task(dashboard.pump(websocket))
    orchestrator = state.open_session(session_id, dashboard)
    orchestrator.start_listening()
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            if state.get_session(session_id) is not orchestrator:
                logger.info("Session %s was reopened elsewhere, closing this socket", session_id)
                await websocket.close()
                break
            if message.get("bytes") is not None:
                orchestrator.handle_audio_chunk(message["bytes"])
            elif message.get("text") is not None:
                handle_device_event(orchestrator, message["text"])
    except WebSocketDisconnect:
        pass
    finally:
        state.close_session(session_id, orchestrator)
        writer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await writer
        logger.info("Session %s ended", session_id)
