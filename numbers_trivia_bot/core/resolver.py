"""Intent resolution for the conversational trivia flow.

WHY: A mention like "@bot give me a math fact" carries an intent and a
category but no number; the follow-up "7" carries only a number. The
resolver decides, turn by turn, whether enough is known to answer and
what the next conversation state is.

HOW: resolve() reads intent, random flag, category and number from the
entity set, merges the category with what earlier turns stored, and then
either answers (one Numbers API lookup), gives up ("didn't understand"),
or asks for the missing number by returning an awaiting-subject context.

RULES:
- resolve() never raises and never mutates the context it is given
- Category precedence: fresh non-general type > stored category > ""
- The random flag overrides an explicit number; "false" does not count as set
- Any turn with a subject ends the exchange (done=True), success or not
- A trivia intent without a subject sets missing_number and leaves done unset
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Optional

from numbers_trivia_bot.api.models import SUBJECT_RANDOM, TriviaRequest, normalize_category
from numbers_trivia_bot.api.numbers import NumbersClient
from numbers_trivia_bot.config import REPLY_STYLE_DECORATED, TRIVIA_REPLY_STYLE
from numbers_trivia_bot.core.entities import (
    ENTITY_INTENT,
    ENTITY_NUMBER,
    ENTITY_RANDOM,
    ENTITY_TYPE,
    Entities,
    first_entity_value,
)
from numbers_trivia_bot.core.sessions import ConversationContext

logger = logging.getLogger(__name__)

TRIVIA_INTENT = "trivia"

NOT_UNDERSTOOD_MESSAGE = (
    "Sorry, I didn't understand what you want. I'm still just a bot, "
    "can you try again?"
)
LOOKUP_FAILED_MESSAGE = "Sorry, I couldn't process your request"


def format_fact(text: str, style: str = TRIVIA_REPLY_STYLE) -> str:
    """Render a fetched fact in the configured reply style."""
    if style == REPLY_STYLE_DECORATED:
        return "*This is what I found* :point_down:\n_{}_".format(text)
    return text


class TriviaResolver:
    """Turns an entity set plus the stored context into the next context."""

    def __init__(self, numbers: NumbersClient, reply_style: Optional[str] = None) -> None:
        self._numbers = numbers
        self._reply_style = reply_style or TRIVIA_REPLY_STYLE

    def resolve(self, context: ConversationContext, entities: Entities) -> ConversationContext:
        intent = first_entity_value(entities, ENTITY_INTENT)
        random_flag = first_entity_value(entities, ENTITY_RANDOM)
        raw_type = first_entity_value(entities, ENTITY_TYPE)

        category = resolve_category(raw_type, context.category)
        if _flag_set(random_flag):
            subject = SUBJECT_RANDOM
        else:
            subject = first_entity_value(entities, ENTITY_NUMBER)

        if intent != TRIVIA_INTENT and not subject:
            return dataclasses.replace(context, response=NOT_UNDERSTOOD_MESSAGE, done=True)

        if subject:
            request = TriviaRequest(subject=subject, category=category)
            result = self._numbers.lookup(request)
            if result.ok:
                response = format_fact(result.text, self._reply_style)
            else:
                logger.warning("Trivia lookup %s failed: %s", request.path, result.error)
                response = LOOKUP_FAILED_MESSAGE
            return dataclasses.replace(
                context,
                response=response,
                done=True,
                missing_number=False,
            )

        return dataclasses.replace(context, category=category, missing_number=True)


def _flag_set(value: Optional[str]) -> bool:
    return value is not None and value.lower() != "false"


def resolve_category(raw_type: Optional[str], stored: Optional[str]) -> str:
    """Pick the effective category for a turn.

    RULES:
    - A freshly extracted type wins; "general" maps to ""
    - Otherwise the category stored by an earlier turn, else ""
    """
    if raw_type:
        return normalize_category(raw_type)
    return stored or ""
