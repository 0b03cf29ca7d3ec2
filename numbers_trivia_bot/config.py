"""Configuration constants, reply styles, and .env loading.

WHY: Centralizes every configurable value (tokens, service URLs, timeouts,
broadcast frequency, reply styles) so they are easy to find, update, and
override without touching handler logic.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level values read from the environment with sensible defaults.
The load_*() helpers provide a clear error when a credential is missing.

RULES:
- Tokens are loaded from .env via python-dotenv, never hardcoded
- All defaults can be overridden via environment variables
- SEND_TRIVIA_FREQ_MS is in milliseconds, everything else in seconds
"""

from __future__ import annotations

import logging
import os
from typing import List, Sequence

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load .env from the project root (where the bot is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Reply styles
# ---------------------------------------------------------------------------

REPLY_STYLE_DECORATED = "decorated"
REPLY_STYLE_PLAIN = "plain"

AMBIENT_MODE_BUTTONS = "buttons"
AMBIENT_MODE_IMMEDIATE = "immediate"


def env_choice(name: str, default: str, allowed: Sequence[str]) -> str:
    """Read an enumerated setting, falling back to default on unknown values.

    RULES:
    - Matching is case-insensitive
    - An unknown value is logged as a warning, never silently accepted
    """
    value = os.getenv(name, default).strip().lower()
    if value not in allowed:
        logger.warning(
            "Unknown %s=%r (expected one of %s), using %r",
            name, value, ", ".join(allowed), default,
        )
        return default
    return value


TRIVIA_REPLY_STYLE = env_choice(
    "TRIVIA_REPLY_STYLE", REPLY_STYLE_DECORATED, (REPLY_STYLE_DECORATED, REPLY_STYLE_PLAIN),
)
AMBIENT_MODE = env_choice(
    "AMBIENT_MODE", AMBIENT_MODE_BUTTONS, (AMBIENT_MODE_BUTTONS, AMBIENT_MODE_IMMEDIATE),
)

# ---------------------------------------------------------------------------
# Slack
# ---------------------------------------------------------------------------

SLACK_SLASH_COMMAND = os.getenv("SLACK_SLASH_COMMAND", "/trivia")
PORT = int(os.getenv("PORT", "3000"))

# ---------------------------------------------------------------------------
# Numbers API
# ---------------------------------------------------------------------------

NUMBERS_API_URL = os.getenv("NUMBERS_API_URL", "http://numbersapi.com")
NUMBERS_TIMEOUT_S = float(os.getenv("NUMBERS_TIMEOUT_S", "5.0"))
NUMBERS_RETRIES = int(os.getenv("NUMBERS_RETRIES", "1"))
NUMBERS_RETRY_BACKOFF_S = float(os.getenv("NUMBERS_RETRY_BACKOFF_S", "0.5"))

# ---------------------------------------------------------------------------
# Wit.ai
# ---------------------------------------------------------------------------

WIT_API_URL = os.getenv("WIT_API_URL", "https://api.wit.ai")
WIT_API_VERSION = os.getenv("WIT_API_VERSION", "20240304")
WIT_TIMEOUT_S = float(os.getenv("WIT_TIMEOUT_S", "10.0"))

# ---------------------------------------------------------------------------
# Sessions and broadcast
# ---------------------------------------------------------------------------

SESSION_IDLE_TTL_S = float(os.getenv("SESSION_IDLE_TTL_S", "900"))
SESSION_SWEEP_INTERVAL_S = 300.0
# How long a message waits behind the same user's in-flight turn
TURN_WAIT_TIMEOUT_S = float(os.getenv("TURN_WAIT_TIMEOUT_S", "30"))

SEND_TRIVIA_FREQ_MS = int(os.getenv("SEND_TRIVIA_FREQ_MS", str(24 * 60 * 60 * 1000)))


def load_webhook_urls() -> List[str]:
    """Return the incoming webhook URLs the daily fact is broadcast to.

    RULES:
    - SLACK_INCOMING_WEBHOOK_URLS is a comma-separated list
    - Blank entries are dropped; an unset variable yields []
    """
    raw = os.getenv("SLACK_INCOMING_WEBHOOK_URLS", "")
    return [url.strip() for url in raw.split(",") if url.strip()]


def load_slack_bot_token() -> str:
    """Load the Slack bot token from the environment.

    RULES:
    - Raises ValueError if the token is missing or empty
    - Never returns a default/placeholder value
    """
    token = os.getenv("SLACK_BOT_TOKEN", "").strip()
    if not token:
        raise ValueError(
            "Slack bot token not configured. "
            "Add SLACK_BOT_TOKEN to the .env file."
        )
    return token


def load_wit_token() -> str:
    """Load the Wit.ai server access token from the environment.

    WHY: Every Wit.ai /message call is authenticated with a Bearer token.
    Loading it lazily lets the rest of the bot start (slash commands,
    ambient trivia) even before NLU is configured.

    RULES:
    - Reads WIT_TOKEN, falling back to the lowercase wit_token name
    - Raises ValueError if neither is set
    """
    token = (os.getenv("WIT_TOKEN") or os.getenv("wit_token") or "").strip()
    if not token:
        raise ValueError(
            "Wit.ai token not configured. "
            "Add WIT_TOKEN to the .env file."
        )
    return token
