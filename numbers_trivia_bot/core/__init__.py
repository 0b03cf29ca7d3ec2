"""Conversation core: entity extraction, sessions, resolver, and turn runner."""

from numbers_trivia_bot.core.sessions import ConversationContext, ReplyTarget, Session, SessionStore

__all__ = ["ConversationContext", "ReplyTarget", "Session", "SessionStore"]
