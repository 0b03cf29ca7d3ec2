"""Reply strings, Block Kit builders, and text helpers for the Slack bot.

WHY: The bot sends a handful of fixed replies (acknowledgements, errors,
the category picker, the channel greeting). Keeping them here keeps
bot.py focused on event routing, and lets tests check the wording and
block structure in one place.

HOW: Plain functions returning strings or lists of Block Kit block dicts
ready for say(blocks=...) or respond(blocks=...).

RULES:
- action_id values must match the handler registrations in bot.py
- Category buttons carry the number in their value
- Python 3.9+ compatible (no match/case, no PEP 604 unions)
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from numbers_trivia_bot.api.models import CATEGORY_DATE, CATEGORY_GENERAL, CATEGORY_MATH

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

COMMAND_RECEIVED_MESSAGE = "Command received :hourglass:"
INVALID_NUMBER_MESSAGE = "Got an error, can you try again with a valid number?"

THINKING_REACTION = "thinking_face"

# Block and action IDs — must match @app.action() registrations in bot.py
TRIVIA_BLOCK_ID = "triviaCommand"
ACTION_TRIVIA_PREFIX = "trivia_"
ACTION_TRIVIA_GENERAL = ACTION_TRIVIA_PREFIX + CATEGORY_GENERAL
ACTION_TRIVIA_MATH = ACTION_TRIVIA_PREFIX + CATEGORY_MATH
ACTION_TRIVIA_DATE = ACTION_TRIVIA_PREFIX + CATEGORY_DATE

ACTION_TRIVIA_PATTERN = re.compile(r"^trivia_(general|math|date)$")

CATEGORY_BUTTONS = [
    (ACTION_TRIVIA_GENERAL, "General"),
    (ACTION_TRIVIA_MATH, "Math"),
    (ACTION_TRIVIA_DATE, "Date"),
]

_MENTION_RE = re.compile(r"<[@#!][^>]*>")
_NUMBER_RE = re.compile(r"[0-9]+")


# ---------------------------------------------------------------------------
# Block Kit builders
# ---------------------------------------------------------------------------


def category_prompt_text(number: str) -> str:
    return "What kind of trivia about {} do you want?".format(number)


def build_category_prompt(number: str) -> List[Dict[str, Any]]:
    """Build the "which kind of trivia?" message with one button per category.

    WHY: A bare number in a channel could be a plain number, something to
    do math with, or a day of the year. Letting the user pick avoids
    guessing.

    RULES:
    - Section text repeats the number so the message reads on its own
    - Buttons: General, Math, Date, each with value=number
    """
    return [
        {
            "type": "section",
            "text": {
                "type": "mrkdwn",
                "text": category_prompt_text(number),
            },
        },
        {
            "type": "actions",
            "block_id": TRIVIA_BLOCK_ID,
            "elements": [
                {
                    "type": "button",
                    "text": {"type": "plain_text", "text": label},
                    "action_id": action_id,
                    "value": number,
                }
                for action_id, label in CATEGORY_BUTTONS
            ],
        },
    ]


def channel_welcome_text(channel_name: str) -> str:
    return "Thank you for inviting me to channel {}".format(channel_name)


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------


def strip_mentions(text: str) -> str:
    """Remove user, channel and special mentions (<@U123>, <#C1|x>, <!here>)."""
    return _MENTION_RE.sub("", text or "").strip()


def find_number(text: str) -> Optional[str]:
    """Return the first run of digits in text (mentions ignored), or None."""
    match = _NUMBER_RE.search(strip_mentions(text))
    return match.group(0) if match else None


def category_from_action(action_id: str) -> Optional[str]:
    """Map a button action_id back to its category name."""
    match = ACTION_TRIVIA_PATTERN.match(action_id or "")
    return match.group(1) if match else None
