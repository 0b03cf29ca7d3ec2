"""One turn of the multi-turn trivia conversation.

WHY: A direct mention has to go through several steps in a fixed order:
find or open the user's session, ask Wit.ai what the text means, let the
resolver decide, reply, and then either close or keep the session. This
module owns that sequence so the Slack handlers stay thin.

HOW: ConversationRunner.handle_turn() holds the user's turn lock for the
whole turn, so a second message from the same user waits for the first to
finish instead of racing it on the stored context. The wait is bounded:
a message that times out gets a "still working" reply instead. Replies go
out through an injected callable, which keeps this module free of Slack
specifics.

RULES:
- A done context deletes the session in the same turn
- An awaiting-subject context is stored and the user is asked for a number
- An NLU failure is logged and reported to the user; the session is kept
- Replies within a turn go to the reply target of the session it opened
- Replies are fire-and-forget: delivery errors are logged, never raised
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Optional

from numbers_trivia_bot.api.wit import WitAPIError, WitClient
from numbers_trivia_bot.config import TURN_WAIT_TIMEOUT_S
from numbers_trivia_bot.core.resolver import TriviaResolver
from numbers_trivia_bot.core.sessions import ConversationContext, ReplyTarget, SessionStore

logger = logging.getLogger(__name__)

ASK_FOR_NUMBER_MESSAGE = "Sure! Which number (or date) do you want trivia about?"
NLU_FAILURE_MESSAGE = (
    "Sorry, I'm having trouble understanding messages right now. "
    "Please try again in a moment."
)
BUSY_MESSAGE = "I'm still working on your last message, give me a moment."

ReplyFn = Callable[[ReplyTarget, str], None]


class ConversationRunner:
    """Drives sessions through the resolver, one message at a time."""

    def __init__(
        self,
        store: SessionStore,
        nlu: WitClient,
        resolver: TriviaResolver,
        reply: Optional[ReplyFn] = None,
        turn_timeout_s: float = TURN_WAIT_TIMEOUT_S,
    ) -> None:
        self.store = store
        self._nlu = nlu
        self._resolver = resolver
        self._reply = reply
        self._turn_timeout_s = turn_timeout_s

    def bind_reply(self, reply: ReplyFn) -> None:
        """Set the function used to deliver replies (the Slack client wrapper)."""
        self._reply = reply

    def handle_turn(
        self,
        user_id: str,
        text: str,
        reply_target: ReplyTarget,
    ) -> Optional[ConversationContext]:
        """Process one message from a user.

        Returns:
            The context produced by the turn, or None if the turn timed out
            waiting for the user's previous one or NLU failed.
        """
        self.store.cleanup_expired()

        with self.store.user_turn(user_id, self._turn_timeout_s) as acquired:
            if not acquired:
                logger.warning("Turn for user %s timed out behind a running one", user_id)
                self._deliver(user_id, reply_target, BUSY_MESSAGE)
                return None

            session = self.store.get_or_create(user_id, reply_target)
            target = session.reply_target

            try:
                entities = self._nlu.extract_entities(text)
            except (WitAPIError, ValueError):
                logger.exception("Wit.ai extraction failed for user %s", user_id)
                self._deliver(user_id, target, NLU_FAILURE_MESSAGE)
                return None

            context = self._resolver.resolve(session.context, entities)

            if context.response:
                self._deliver(user_id, target, context.response)
            elif context.missing_number:
                self._deliver(user_id, target, ASK_FOR_NUMBER_MESSAGE)

            if context.done:
                self.store.complete(user_id)
            else:
                self.store.update(user_id, context)

            return context

    def send(self, user_id: str, text: str) -> None:
        """Deliver text to the reply target of the user's session."""
        session = self.store.get(user_id)
        if session is None:
            logger.warning("No session for user %s, dropping reply", user_id)
            return
        self._deliver(user_id, session.reply_target, text)

    def _deliver(self, user_id: str, target: ReplyTarget, text: str) -> None:
        if self._reply is None:
            logger.warning("No reply function bound, dropping reply to %s", user_id)
            return

        try:
            self._reply(target, text)
        except Exception:
            logger.exception("Failed to deliver reply to user %s", user_id)
