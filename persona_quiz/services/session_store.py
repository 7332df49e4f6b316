"""Session Store - in-memory quiz sessions.

Holds one ``SessionState`` per browser session id. Nothing is written to disk;
sessions disappear with the process, and idle ones are evicted after
``SESSION_TTL_SECONDS``.
"""

from __future__ import annotations

import logging
import time
from threading import Lock
from typing import Callable, Optional

from config import SESSION_TTL_SECONDS
from persona_quiz.session import SessionState, new_session

logger = logging.getLogger(__name__)


class SessionStore:
    """In-memory session storage (singleton)."""

    _instance: Optional["SessionStore"] = None
    _lock = Lock()

    def __new__(cls) -> "SessionStore":
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._initialized = False
            return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True
        self._sessions: dict[str, SessionState] = {}
        self._last_seen: dict[str, float] = {}
        self._state_lock = Lock()
        self.ttl_seconds: float = SESSION_TTL_SECONDS
        self.clock: Callable[[], float] = time.monotonic

    def get(self, session_id: str) -> SessionState:
        """Current state for a session.

        Unknown ids get a fresh state that is not stored; only a transition
        that changes something creates an entry.
        """
        with self._state_lock:
            state = self._sessions.get(session_id)
            if state is None:
                return new_session()
            self._last_seen[session_id] = self.clock()
            return state

    def update(
        self,
        session_id: str,
        transition: Callable[[SessionState], SessionState],
    ) -> tuple[SessionState, SessionState]:
        """Apply a transition atomically.

        Returns:
            (before, after) states
        """
        with self._state_lock:
            now = self.clock()
            self._evict_expired(now)
            before = self._sessions.get(session_id)
            if before is None:
                before = new_session()
                after = transition(before)
                if after is before:
                    return before, after
            else:
                after = transition(before)
            self._sessions[session_id] = after
            self._last_seen[session_id] = now
            return before, after

    def _evict_expired(self, now: float) -> None:
        expired = [sid for sid, seen in self._last_seen.items() if now - seen > self.ttl_seconds]
        for sid in expired:
            del self._sessions[sid]
            del self._last_seen[sid]
        if expired:
            logger.info("Evicted %d idle sessions", len(expired))

    def clear(self) -> None:
        """Drop every session."""
        with self._state_lock:
            self._sessions.clear()
            self._last_seen.clear()

    def __len__(self) -> int:
        return len(self._sessions)
