"""Tests for the session socket and REST routes."""
import asyncio

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from conftest import StubRecognizer
from shazam_forever.api.app import app
from shazam_forever.api.routes.session import WebSocketDashboard
from shazam_forever.api.state import AppState, get_state
from shazam_forever.core.presentation import IDLE_EXPANDED_TEXT, LISTENING_TEXT, PAUSED_TEXT

API_KEY = "test-key"


@pytest.fixture
def state():
    return AppState(recognition_client=StubRecognizer())


@pytest.fixture
def client(monkeypatch, state):
    monkeypatch.setenv("PACKAGE_NAME", "com.example.shazam")
    monkeypatch.setenv("MENTRAOS_API_KEY", API_KEY)
    monkeypatch.setenv("PORT", "3000")
    app.dependency_overrides[get_state] = lambda: state
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _connect(client, session_id="abc", key=API_KEY):
    return client.websocket_connect(f"/ws/session/{session_id}", headers={"x-api-key": key})


def _dashboard(ws):
    main = ws.receive_json()
    expanded = ws.receive_json()
    assert main["target"] == "main"
    assert expanded["target"] == "expanded"
    return main["text"], expanded["text"]


class TestHealth:
    def test_reports_package(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json() == {"status": "ok", "package": "com.example.shazam"}


class TestStartup:
    def test_missing_api_key_aborts(self, monkeypatch):
        monkeypatch.delenv("MENTRAOS_API_KEY", raising=False)
        monkeypatch.setenv("PACKAGE_NAME", "com.example.shazam")
        monkeypatch.setenv("PORT", "3000")
        with pytest.raises(Exception):
            with TestClient(app):
                pass


class TestSessionSocket:
    def test_rejects_bad_key(self, client):
        with pytest.raises(WebSocketDisconnect):
            with _connect(client, key="wrong") as ws:
                ws.receive_json()

    def test_starts_listening_on_connect(self, client):
        with _connect(client) as ws:
            main, expanded = _dashboard(ws)
            assert main == LISTENING_TEXT
            assert expanded == IDLE_EXPANDED_TEXT

    def test_audio_is_buffered(self, client, state):
        with _connect(client) as ws:
            _dashboard(ws)
            ws.send_bytes(b"\x00" * 100)
            ws.send_bytes(b"\x00" * 200)
            ws.send_text('{"type": "battery", "level": 80, "charging": true}')
            # pausing flushes the buffer and renders the paused status
            ws.send_text('{"type": "listening", "enabled": false}')
            main, _ = _dashboard(ws)
            assert main == PAUSED_TEXT
            orchestrator = state.get_session("abc")
            assert orchestrator.pending_chunks == []
            assert orchestrator.state.value == "idle"

    def test_dashboard_mode_rerenders(self, client):
        with _connect(client) as ws:
            _dashboard(ws)
            ws.send_text('{"type": "dashboard_mode", "mode": "expanded"}')
            main, _ = _dashboard(ws)
            assert main == LISTENING_TEXT

    def test_malformed_event_ignored(self, client):
        with _connect(client) as ws:
            _dashboard(ws)
            ws.send_text("not json")
            ws.send_text('{"type": "dashboard_mode", "mode": "main"}')
            main, _ = _dashboard(ws)
            assert main == LISTENING_TEXT


class TestSessionRoutes:
    def test_unknown_session_404(self, client):
        assert client.get("/api/sessions/nope").status_code == 404
        assert client.post("/api/sessions/nope/listening/stop").status_code == 404

    def test_list_and_control(self, client):
        with _connect(client, session_id="s1") as ws:
            _dashboard(ws)
            sessions = client.get("/api/sessions").json()["sessions"]
            assert [s["session_id"] for s in sessions] == ["s1"]

            r = client.post("/api/sessions/s1/listening/stop")
            assert r.json() == {"ok": True, "state": "idle"}
            main, _ = _dashboard(ws)
            assert main == PAUSED_TEXT

            r = client.post("/api/sessions/s1/listening/start")
            assert r.json()["state"] == "listening"
            main, _ = _dashboard(ws)
            assert main == LISTENING_TEXT

            snap = client.get("/api/sessions/s1").json()
            assert snap["current_song"] is None
            assert client.get("/api/sessions/s1/history").json() == {"history": []}


class TestDuplicateSession:
    def test_reopened_session_closes_old_socket(self, client, state):
        with _connect(client, session_id="dup") as old:
            _dashboard(old)
            first = state.get_session("dup")
            with _connect(client, session_id="dup") as new:
                _dashboard(new)
                second = state.get_session("dup")
                assert second is not first
                assert first.closed

                old.send_text('{"type": "listening", "enabled": true}')
                with pytest.raises(WebSocketDisconnect):
                    old.receive_json()
                assert not first.is_listening
                assert state.get_session("dup") is second
                assert second.is_listening


class FailingSocket:
    def __init__(self) -> None:
        self.sent = 0

    async def send_json(self, message):
        self.sent += 1
        raise WebSocketDisconnect(code=1006)


class TestWebSocketDashboard:
    def test_writer_stops_when_socket_is_gone(self):
        socket = FailingSocket()

        async def scenario():
            dashboard = WebSocketDashboard()
            dashboard.write_to_main("one")
            await dashboard.pump(socket)
            dashboard.write_to_main("two")
            dashboard.write_to_expanded("three")
            return dashboard

        dashboard = asyncio.run(scenario())
        assert socket.sent == 1
        assert dashboard.closed
        assert dashboard._queue.empty()
