"""In-memory conversation sessions with per-user locking and idle expiry.

WHY: A trivia conversation can span several messages ("give me a math
fact" → "about which number?" → "7"). The partial answers have to live
somewhere between messages, and a second message from the same user must
not race the first one while its lookup is still running.

HOW: Three pieces work together:
  ConversationContext — the slot-filling payload (category, missing_number,
                        response, done)
  Session             — one user's context plus where to send replies
  SessionStore        — thread-safe dict keyed by user id, with a
                        per-user lock and TTL-based idle eviction

RULES:
- At most one live session per user id
- All store mutations acquire self._lock
- user_turn(user_id) serializes turns; its lock lives only while a turn
  holds it or waits for it
- Sessions idle longer than the TTL are removed by cleanup_expired(),
  except while their user has a turn in flight
- get() returns None for unknown users (no exceptions)
"""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from numbers_trivia_bot.config import SESSION_IDLE_TTL_S

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversationContext:
    """Slot-filling state accumulated across the turns of one conversation.

    RULES:
    - category: None when never set, "" for general, else "math"/"date"
    - missing_number: True while waiting for the user to name a subject
    - response: reply text for the current turn, or None
    - done: True once the exchange is finished and the session must go
    """

    category: Optional[str] = None
    missing_number: bool = False
    response: Optional[str] = None
    done: bool = False


@dataclass(frozen=True)
class ReplyTarget:
    """Where replies for a conversation are posted."""

    channel: str
    thread_ts: Optional[str] = None


@dataclass
class Session:
    """One user's open conversation."""

    user_id: str
    reply_target: ReplyTarget
    created_at: float
    updated_at: float
    context: ConversationContext = field(default_factory=ConversationContext)


class _UserLock:
    """A user's turn lock plus the number of threads holding or awaiting it."""

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


class SessionStore:
    """Thread-safe in-memory store of conversation sessions.

    RULES:
    - get_or_create() keeps the existing session (and its reply target)
    - update() and complete() on unknown users are no-ops
    - TTL is measured from the last touch (get_or_create or update)
    """

    def __init__(self, ttl_seconds: float = SESSION_IDLE_TTL_S) -> None:
        self._sessions: Dict[str, Session] = {}
        self._user_locks: Dict[str, _UserLock] = {}
        self._lock = threading.Lock()
        self._ttl_seconds = ttl_seconds

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    @contextmanager
    def user_turn(self, user_id: str, timeout: float = -1) -> Iterator[bool]:
        """Hold the lock that serializes turns from one user.

        Yields True once the lock is held, or False if timeout (seconds)
        ran out first. A negative timeout waits indefinitely.

        RULES:
        - The lock entry is dropped when its last holder or waiter leaves
        """
        with self._lock:
            entry = self._user_locks.get(user_id)
            if entry is None:
                entry = _UserLock()
                self._user_locks[user_id] = entry
            entry.users += 1

        acquired = entry.lock.acquire(timeout=timeout)
        try:
            yield acquired
        finally:
            if acquired:
                entry.lock.release()
            with self._lock:
                entry.users -= 1
                if entry.users == 0:
                    del self._user_locks[user_id]

    def get(self, user_id: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.get(user_id)

    def get_or_create(self, user_id: str, reply_target: ReplyTarget) -> Session:
        """Return the user's session, creating an empty one if needed."""
        with self._lock:
            session = self._sessions.get(user_id)
            if session is not None:
                session.updated_at = time.time()
                return session

            now = time.time()
            session = Session(
                user_id=user_id,
                reply_target=reply_target,
                created_at=now,
                updated_at=now,
            )
            self._sessions[user_id] = session

        logger.info("Started session for user %s", user_id)
        return session

    def update(self, user_id: str, context: ConversationContext) -> Optional[Session]:
        """Replace a session's context and bump its idle timer."""
        with self._lock:
            session = self._sessions.get(user_id)
            if session is None:
                return None
            session.context = context
            session.updated_at = time.time()
            return session

    def complete(self, user_id: str) -> bool:
        """Remove a finished session. Returns False if there was none."""
        with self._lock:
            session = self._sessions.pop(user_id, None)

        if session is None:
            return False

        logger.info("Completed session for user %s", user_id)
        return True

    def cleanup_expired(self) -> int:
        """Drop sessions idle past the TTL.

        RULES:
        - Returns the count of removed sessions
        - Sessions whose user has a turn in flight are skipped
        """
        now = time.time()

        with self._lock:
            expired = [
                user_id for user_id, session in self._sessions.items()
                if now - session.updated_at > self._ttl_seconds
                and user_id not in self._user_locks
            ]
            for user_id in expired:
                del self._sessions[user_id]

        for user_id in expired:
            logger.info("Expired idle session for user %s", user_id)

        return len(expired)
