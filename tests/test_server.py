"""Tests for the FastAPI server (HTTP mode).

HOW: TestClient is used without its context manager, so the lifespan
(which would build a real Bolt app and call Slack) does not run. The
Slack request handler is swapped in per test.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

from numbers_trivia_bot import __version__
from numbers_trivia_bot.core.sessions import ReplyTarget
from numbers_trivia_bot.server.app import app
from numbers_trivia_bot.slack.bot import session_store


@pytest.fixture
def client():
    app.state.slack_handler = None
    yield TestClient(app)
    app.state.slack_handler = None
    session_store.complete("U_HEALTH")


class TestHealth:

    def test_health_ok(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert body["version"] == __version__
        assert body["broadcast_running"] is False

    def test_health_counts_sessions(self, client):
        before = client.get("/health").json()["active_sessions"]
        session_store.get_or_create("U_HEALTH", ReplyTarget(channel="C1"))
        after = client.get("/health").json()["active_sessions"]
        assert after == before + 1


class TestSlackEvents:

    def test_unavailable_before_startup(self, client):
        resp = client.post("/slack/events", json={"type": "event_callback"})
        assert resp.status_code == 503

    def test_delegates_to_bolt_handler(self, client):
        handler = MagicMock()
        handler.handle = AsyncMock(return_value=JSONResponse({"ok": True}))
        app.state.slack_handler = handler

        resp = client.post("/slack/events", json={"type": "event_callback"})

        assert resp.status_code == 200
        assert resp.json() == {"ok": True}
        handler.handle.assert_awaited_once()
