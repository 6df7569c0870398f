from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from idle_guard.server import create_app
from idle_guard.state.settings import AppSettings, AuthSettings, IdleSettings, LimitsSettings
from idle_guard.config.websocket import (
    WS_CLOSE_BUSY_CODE,
    WS_CLOSE_IDLE_LOGOUT_CODE,
    WS_CLOSE_UNAUTHORIZED_CODE,
    WS_CLOSE_CLIENT_REQUEST_CODE,
)

API_KEY = "test-key"


def _settings(
    *,
    idle_max_ms: int = 60000,
    warning_ms: int = 10000,
    max_messages: int = 100,
    max_connections: int = 10,
) -> AppSettings:
    return AppSettings(
        idle=IdleSettings(idle_max_ms=idle_max_ms, warning_ms=warning_ms, login_route="/login", channel_name="idle"),
        auth=AuthSettings(api_key=API_KEY),
        limits=LimitsSettings(
            max_concurrent_connections=max_connections,
            ws_message_window_seconds=60.0,
            ws_max_messages_per_window=max_messages,
        ),
    )


def _msg(msg_type: str, payload: dict[str, Any] | None = None, *, session_id: str = "s1") -> dict[str, Any]:
    return {"type": msg_type, "session_id": session_id, "request_id": "r1", "payload": payload or {}}


def test_health() -> None:
    with TestClient(create_app(_settings())) as client:
        assert client.get("/healthz").json() == {"status": "ok"}


def test_rejects_missing_api_key() -> None:
    with TestClient(create_app(_settings())) as client:
        with client.websocket_connect("/ws") as ws:
            msg = ws.receive_json()
            assert msg["type"] == "error"
            assert msg["payload"]["code"] == "authentication_failed"
            with pytest.raises(WebSocketDisconnect) as exc:
                ws.receive_json()
            assert exc.value.code == WS_CLOSE_UNAUTHORIZED_CODE


def test_ping_and_end() -> None:
    with TestClient(create_app(_settings())) as client:
        with client.websocket_connect(f"/ws?api_key={API_KEY}") as ws:
            ws.send_json(_msg("ping"))
            assert ws.receive_json()["type"] == "pong"

            ws.send_json(_msg("end"))
            assert ws.receive_json()["type"] == "session_end"
            with pytest.raises(WebSocketDisconnect) as exc:
                ws.receive_json()
            assert exc.value.code == WS_CLOSE_CLIENT_REQUEST_CODE


def test_activity_requires_session() -> None:
    with TestClient(create_app(_settings())) as client:
        with client.websocket_connect("/ws", headers={"X-API-Key": API_KEY}) as ws:
            ws.send_json(_msg("activity", {"event": "click"}))
            msg = ws.receive_json()
            assert msg["payload"]["code"] == "invalid_payload"
            assert msg["payload"]["details"]["reason_code"] == "no_session"

            ws.send_text("not json")
            assert ws.receive_json()["payload"]["code"] == "invalid_message"


def test_session_update_reports_state_and_pins_session() -> None:
    with TestClient(create_app(_settings())) as client:
        with client.websocket_connect(f"/ws?api_key={API_KEY}") as ws:
            ws.send_json(_msg("session.update", {"user": "alice", "route": "/activities"}))
            msg = ws.receive_json()
            assert msg["type"] == "idle.state"
            assert msg["payload"] == {"phase": "active", "seconds_left": 0, "idle_max_ms": 60000}

            ws.send_json(_msg("session.update", {"route": "/"}, session_id="other"))
            err = ws.receive_json()
            assert err["payload"]["details"]["reason_code"] == "session_id_mismatch"

            ws.send_json(_msg("extend"))
            assert ws.receive_json()["payload"]["phase"] == "active"


def test_idle_tab_is_warned_then_logged_out() -> None:
    with TestClient(create_app(_settings(idle_max_ms=600, warning_ms=400))) as client:
        with client.websocket_connect(f"/ws?api_key={API_KEY}") as ws:
            ws.send_json(_msg("session.update", {"user": "alice", "route": "/"}))
            assert ws.receive_json()["payload"]["phase"] == "active"

            warning = ws.receive_json()
            assert warning["type"] == "idle.state"
            assert warning["payload"]["phase"] == "warning"
            assert warning["payload"]["seconds_left"] == 1

            assert ws.receive_json()["payload"]["phase"] == "logged_out"
            assert ws.receive_json()["type"] == "signed_out"
            navigate = ws.receive_json()
            assert navigate == {
                "type": "navigate",
                "session_id": "s1",
                "request_id": "r1",
                "payload": {"route": "/login"},
            }
            with pytest.raises(WebSocketDisconnect) as exc:
                ws.receive_json()
            assert exc.value.code == WS_CLOSE_IDLE_LOGOUT_CODE


def test_messages_are_rate_limited() -> None:
    with TestClient(create_app(_settings(max_messages=2))) as client:
        with client.websocket_connect(f"/ws?api_key={API_KEY}") as ws:
            ws.send_json(_msg("session.update", {"user": "alice", "route": "/"}))
            assert ws.receive_json()["type"] == "idle.state"
            ws.send_json(_msg("activity", {"event": "click"}))
            ws.send_json(_msg("activity", {"event": "click"}))
            err = ws.receive_json()
            assert err["payload"]["code"] == "rate_limited"

            ws.send_json(_msg("ping"))
            assert ws.receive_json()["type"] == "pong"


def test_connections_over_capacity_are_refused() -> None:
    with TestClient(create_app(_settings(max_connections=1))) as client:
        with client.websocket_connect(f"/ws?api_key={API_KEY}") as first:
            first.send_json(_msg("ping"))
            assert first.receive_json()["type"] == "pong"

            with client.websocket_connect(f"/ws?api_key={API_KEY}") as second:
                msg = second.receive_json()
                assert msg["type"] == "error"
                assert msg["payload"]["code"] == "server_at_capacity"
                with pytest.raises(WebSocketDisconnect) as exc:
                    second.receive_json()
                assert exc.value.code == WS_CLOSE_BUSY_CODE


def test_extend_during_warning_sends_one_state_frame() -> None:
    with TestClient(create_app(_settings(idle_max_ms=3000, warning_ms=2800))) as client:
        with client.websocket_connect(f"/ws?api_key={API_KEY}") as ws:
            ws.send_json(_msg("session.update", {"user": "alice", "route": "/"}))
            assert ws.receive_json()["payload"]["phase"] == "active"
            assert ws.receive_json()["payload"] == {"phase": "warning", "seconds_left": 3, "idle_max_ms": 3000}

            ws.send_json(_msg("extend"))
            assert ws.receive_json()["payload"]["phase"] == "active"
            # The next frame is the warning of the renewed budget, not a repeated ack.
            assert ws.receive_json()["payload"]["phase"] == "warning"


def _read_until_navigate(ws) -> list[dict[str, Any]]:
    frames: list[dict[str, Any]] = []
    while not frames or frames[-1]["type"] != "navigate":
        frames.append(ws.receive_json())
    return frames


def test_tabs_sharing_a_session_are_logged_out_together() -> None:
    app = create_app(_settings(idle_max_ms=600, warning_ms=400))
    with TestClient(app) as client:
        with (
            client.websocket_connect(f"/ws?api_key={API_KEY}") as tab1,
            client.websocket_connect(f"/ws?api_key={API_KEY}") as tab2,
        ):
            tab1.send_json(_msg("session.update", {"user": "alice", "route": "/"}, session_id="shared"))
            assert tab1.receive_json()["payload"]["phase"] == "active"
            tab2.send_json(_msg("session.update", {"user": "alice", "route": "/reports"}, session_id="shared"))
            assert tab2.receive_json()["payload"]["phase"] == "active"

            for ws in (tab1, tab2):
                frames = _read_until_navigate(ws)
                types = [frame["type"] for frame in frames]
                assert "signed_out" in types
                assert frames[-1]["payload"] == {"route": "/login"}
                assert frames[-1]["session_id"] == "shared"
                with pytest.raises(WebSocketDisconnect) as exc:
                    ws.receive_json()
                assert exc.value.code == WS_CLOSE_IDLE_LOGOUT_CODE

        assert len(app.state.runtime_deps.scopes) == 0


def test_closed_connections_do_not_leave_scopes_behind() -> None:
    app = create_app(_settings())
    with TestClient(app) as client:
        for i in range(5):
            with client.websocket_connect(f"/ws?api_key={API_KEY}") as ws:
                ws.send_json(_msg("session.update", {"route": "/"}, session_id=f"anon-{i}"))
                assert ws.receive_json()["type"] == "idle.state"
                ws.send_json(_msg("end", session_id=f"anon-{i}"))
                assert ws.receive_json()["type"] == "session_end"
                with pytest.raises(WebSocketDisconnect):
                    ws.receive_json()

        assert len(app.state.runtime_deps.scopes) == 0
