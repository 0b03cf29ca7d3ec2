"""Slack bot: event, command, and action handlers plus the Socket Mode entry.

WHY: Slack delivers five kinds of input the bot cares about: the slash
command, numbers mentioned in channel chatter, clicks on the category
buttons, direct mentions / DMs for the conversational flow, and the bot
being added to a channel. This module routes each one to the right piece
of the core.

HOW: Uses slack-bolt. Slash commands and button clicks ack immediately
and call the Numbers API directly. Ambient numbers either get a category
picker or an immediate answer, depending on AMBIENT_MODE. Mentions and
DMs go through the ConversationRunner, which keeps per-user sessions.

RULES:
- All Slack commands and actions must be ack()'d within 3 seconds
- Slash commands and buttons never touch the session store
- Messages from bots and message subtypes (edits, joins) are ignored
- A channel message that mentions the bot is left to the app_mention handler
- Runnable as: python -m numbers_trivia_bot (Socket Mode)
"""

from __future__ import annotations

import logging
import os
import random
from typing import Any, Dict, Optional

from slack_bolt import App
from slack_bolt.adapter.socket_mode import SocketModeHandler

from numbers_trivia_bot.api.numbers import NumbersClient
from numbers_trivia_bot.api.wit import WitClient
from numbers_trivia_bot.broadcast import TriviaBroadcaster
from numbers_trivia_bot.config import (
    AMBIENT_MODE,
    AMBIENT_MODE_IMMEDIATE,
    SLACK_SLASH_COMMAND,
    load_slack_bot_token,
)
from numbers_trivia_bot.core.conversation import ConversationRunner, ReplyFn
from numbers_trivia_bot.core.resolver import LOOKUP_FAILED_MESSAGE, TriviaResolver, format_fact
from numbers_trivia_bot.core.sessions import ReplyTarget, SessionStore
from numbers_trivia_bot.slack.messages import (
    ACTION_TRIVIA_PATTERN,
    COMMAND_RECEIVED_MESSAGE,
    INVALID_NUMBER_MESSAGE,
    THINKING_REACTION,
    build_category_prompt,
    category_from_action,
    category_prompt_text,
    channel_welcome_text,
    find_number,
    strip_mentions,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Shared services
# ---------------------------------------------------------------------------

numbers_client = NumbersClient()
session_store = SessionStore()
conversation = ConversationRunner(
    store=session_store,
    nlu=WitClient(),
    resolver=TriviaResolver(numbers_client),
)


# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------


def create_app(bot_token: Optional[str] = None) -> App:
    """Create and configure the Slack Bolt app with all handlers.

    WHY: Factory function allows tests and the HTTP server to build the
    app on demand and avoids module-level side effects (Bolt calls
    auth.test when the app is constructed).

    RULES:
    - If bot_token is None, reads SLACK_BOT_TOKEN via load_slack_bot_token()
    - The conversation runner replies through this app's Web API client
    """
    token = bot_token or load_slack_bot_token()

    app = App(token=token)

    app.command(SLACK_SLASH_COMMAND)(handle_slash_command)
    app.action(ACTION_TRIVIA_PATTERN)(handle_trivia_button)
    app.event("app_mention")(handle_app_mention)
    app.event("message")(handle_message)
    app.event("member_joined_channel")(handle_member_joined_channel)

    conversation.bind_reply(make_reply(app.client))

    return app


def make_reply(client: Any) -> ReplyFn:
    """Build the reply callable the conversation runner posts through."""

    def reply(target: ReplyTarget, text: str) -> None:
        client.chat_postMessage(
            channel=target.channel,
            thread_ts=target.thread_ts,
            text=text,
        )

    return reply


# ---------------------------------------------------------------------------
# Slash command
# ---------------------------------------------------------------------------


def handle_slash_command(ack: Any, command: Dict[str, Any], respond: Any, logger: Any) -> None:
    """Answer /trivia [number] with a general fact.

    WHY: The slash command is the quickest way to get a fact: an explicit
    number, or a random one between 0 and 99 when no argument is given.

    RULES:
    - ack() FIRST with the ephemeral "Command received" placeholder
    - The placeholder is then replaced with the fact or an error message
    """
    ack(text=COMMAND_RECEIVED_MESSAGE)

    subject = (command.get("text") or "").strip()
    if not subject:
        subject = str(random.randint(0, 99))

    result = numbers_client.fetch(subject)
    text = result.text if result.ok else INVALID_NUMBER_MESSAGE

    try:
        respond(text=text, response_type="ephemeral", replace_original=True)
    except Exception:
        logger.exception("Failed to respond to slash command for %s", subject)


# ---------------------------------------------------------------------------
# Event handlers
# ---------------------------------------------------------------------------


def handle_message(event: Dict[str, Any], client: Any, context: Any, logger: Any) -> None:
    """Route plain messages: DMs to the conversation, numbers to trivia.

    RULES:
    - Ignore bot messages and any message subtype
    - Direct messages (channel_type "im") run a conversation turn
    - Channel messages mentioning the bot are skipped (app_mention covers them)
    - Channel messages containing a number get the ambient trivia treatment
    """
    if event.get("subtype") or event.get("bot_id"):
        return

    text = event.get("text") or ""

    if event.get("channel_type") == "im":
        _run_conversation(event, strip_mentions(text))
        return

    bot_user_id = context.get("bot_user_id") if context else None
    if bot_user_id and "<@{}>".format(bot_user_id) in text:
        return

    number = find_number(text)
    if number is None:
        return

    _add_reaction(client, event, THINKING_REACTION, logger)

    channel = event.get("channel", "")
    thread_ts = event.get("thread_ts")

    if AMBIENT_MODE == AMBIENT_MODE_IMMEDIATE:
        result = numbers_client.fetch(number)
        reply = format_fact(result.text) if result.ok else LOOKUP_FAILED_MESSAGE
        _post_message(client, logger, channel=channel, thread_ts=thread_ts, text=reply)
        return

    _post_message(
        client,
        logger,
        channel=channel,
        thread_ts=thread_ts,
        blocks=build_category_prompt(number),
        text=category_prompt_text(number),
    )


def handle_app_mention(event: Dict[str, Any], logger: Any) -> None:
    """Run a conversation turn for "@bot tell me something about 42"."""
    _run_conversation(event, strip_mentions(event.get("text") or ""))


def handle_member_joined_channel(
    event: Dict[str, Any], client: Any, context: Any, logger: Any
) -> None:
    """Greet a channel when the bot itself is invited to it."""
    bot_user_id = context.get("bot_user_id") if context else None
    if not bot_user_id or event.get("user") != bot_user_id:
        return

    channel_id = event.get("channel", "")
    channel_name = channel_id
    try:
        info = client.conversations_info(channel=channel_id)
        channel_name = info.get("channel", {}).get("name") or channel_id
    except Exception:
        logger.exception("Failed to fetch channel info for %s", channel_id)

    _post_message(client, logger, channel=channel_id, text=channel_welcome_text(channel_name))


# ---------------------------------------------------------------------------
# Action handlers (Block Kit interactions)
# ---------------------------------------------------------------------------


def handle_trivia_button(ack: Any, action: Dict[str, Any], respond: Any, logger: Any) -> None:
    """Handle a General / Math / Date click on the category picker.

    RULES:
    - ack() FIRST
    - The picker message is replaced with the fact or an error message
    """
    ack()

    category = category_from_action(action.get("action_id", ""))
    number = action.get("value", "")

    result = numbers_client.fetch(number, category)
    text = result.text if result.ok else INVALID_NUMBER_MESSAGE

    try:
        respond(text=text, replace_original=True)
    except Exception:
        logger.exception("Failed to replace trivia picker for %s", number)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run_conversation(event: Dict[str, Any], text: str) -> None:
    user_id = event.get("user")
    if not user_id:
        return

    target = ReplyTarget(
        channel=event.get("channel", ""),
        thread_ts=event.get("thread_ts"),
    )
    conversation.handle_turn(user_id, text, target)


def _add_reaction(client: Any, event: Dict[str, Any], name: str, logger: Any) -> None:
    try:
        client.reactions_add(
            channel=event.get("channel", ""),
            timestamp=event.get("ts", ""),
            name=name,
        )
    except Exception:
        logger.exception("Failed to add %s reaction", name)


def _post_message(client: Any, logger: Any, **kwargs: Any) -> None:
    try:
        client.chat_postMessage(**kwargs)
    except Exception:
        logger.exception("Failed to post message to %s", kwargs.get("channel"))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Start the Slack bot in Socket Mode with the trivia broadcaster.

    RULES:
    - Requires SLACK_BOT_TOKEN and SLACK_APP_TOKEN environment variables
    - Blocks on the SocketModeHandler.start() call
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    bot_token = load_slack_bot_token()
    app_token = os.environ.get("SLACK_APP_TOKEN", "")
    if not app_token:
        raise ValueError("SLACK_APP_TOKEN environment variable is required")

    app = create_app(bot_token=bot_token)

    broadcaster = TriviaBroadcaster(numbers_client)
    broadcaster.start()

    logger.info("Starting Slack bot in Socket Mode...")
    logger.info("Slash command: %s, ambient mode: %s", SLACK_SLASH_COMMAND, AMBIENT_MODE)

    handler = SocketModeHandler(app, app_token)
    try:
        handler.start()
    finally:
        broadcaster.stop()


if __name__ == "__main__":
    main()
