"""FastAPI application serving Slack events over HTTP.

WHY: Socket Mode is convenient for development, but a hosted bot usually
receives Slack events as signed HTTP requests. This app exposes the
events endpoint, a health check, and owns the background work (trivia
broadcast, idle session sweep) for the lifetime of the server.

HOW: slack-bolt's FastAPI adapter (SlackRequestHandler) verifies and
dispatches every POST /slack/events to the same handlers Socket Mode
uses. The lifespan builds the Bolt app, starts the broadcaster and a
periodic session cleanup task, and stops both on shutdown.

RULES:
- The Bolt app is built in the lifespan, not at import (it calls auth.test)
- /slack/events answers 503 until the Bolt app is ready
- Slash commands, actions and events all post to /slack/events
- Python 3.9+ compatible (no match/case, no PEP 604 unions)
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from slack_bolt.adapter.fastapi import SlackRequestHandler

from numbers_trivia_bot import __version__
from numbers_trivia_bot.broadcast import TriviaBroadcaster
from numbers_trivia_bot.config import PORT, SESSION_SWEEP_INTERVAL_S
from numbers_trivia_bot.server.models import ErrorResponse, HealthResponse
from numbers_trivia_bot.slack.bot import create_app, numbers_client, session_store

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

broadcaster = TriviaBroadcaster(numbers_client)


async def _periodic_cleanup() -> None:
    """Drop idle sessions every SESSION_SWEEP_INTERVAL_S seconds."""
    while True:
        await asyncio.sleep(SESSION_SWEEP_INTERVAL_S)
        removed = session_store.cleanup_expired()
        if removed:
            logger.info("Swept %d idle sessions", removed)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the Bolt app and start background work; stop it on shutdown."""
    if getattr(app.state, "slack_handler", None) is None:
        app.state.slack_handler = SlackRequestHandler(create_app())

    broadcaster.start()
    task = asyncio.create_task(_periodic_cleanup())
    yield
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
    broadcaster.stop()


app = FastAPI(
    lifespan=lifespan,
    title="Numbers Trivia Bot",
    description="Slack events endpoint and health check for the Numbers Trivia Bot.",
    version=__version__,
)
app.state.slack_handler = None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.post(
    "/slack/events",
    tags=["slack"],
    summary="Slack events, slash commands and interactivity",
    responses={503: {"model": ErrorResponse, "description": "Bolt app not ready."}},
)
async def slack_events(req: Request):
    handler = app.state.slack_handler
    if handler is None:
        raise HTTPException(status_code=503, detail="Slack app is not ready yet")
    return await handler.handle(req)


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=__version__,
        active_sessions=len(session_store),
        broadcast_running=broadcaster.running,
    )


def run_server() -> None:
    """Entry point for HTTP mode (python -m numbers_trivia_bot --http)."""
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    uvicorn.run(app, host="0.0.0.0", port=PORT)
