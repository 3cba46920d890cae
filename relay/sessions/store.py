"""
Session store implementations.

The store is the only state shared across requests. It keeps deep copies of
sessions so that in-request mutations become visible only once committed.
"""

import logging
from datetime import UTC, datetime, timedelta

from relay.config import get_config
from relay.core.domain import Session
from relay.core.exceptions import SessionCommitError
from relay.core.ports import SessionStore


logger = logging.getLogger(__name__)


class InMemorySessionStore(SessionStore):
    """
    In-memory implementation of SessionStore.

    Suitable for a single-process deployment and for tests.
    Data is lost when the application restarts.
    """

    def __init__(self, max_idle: timedelta):
        self._sessions: dict[str, Session] = {}
        self._max_idle = max_idle

    def _is_expired(self, session: Session) -> bool:
        return datetime.now(UTC) - session.last_seen > self._max_idle

    async def get(self, session_id: str) -> Session | None:
        session = self._sessions.get(session_id)
        if session is None:
            return None
        if self._is_expired(session):
            del self._sessions[session_id]
            logger.info("Session expired", extra={"session_id": session_id[:8]})
            return None
        return session.model_copy(deep=True)

    async def put(self, session: Session) -> None:
        if session.session_id not in self._sessions:
            purged = self.purge_expired()
            if purged:
                logger.debug(f"Purged {purged} expired sessions")
        try:
            stored = session.model_copy(deep=True)
            stored.last_seen = datetime.now(UTC)
            self._sessions[session.session_id] = stored
        except Exception as e:
            raise SessionCommitError(f"Failed to store session: {e}") from e
        session.last_seen = stored.last_seen

    async def touch(self, session_id: str) -> bool:
        session = self._sessions.get(session_id)
        if session is None or self._is_expired(session):
            return False
        session.last_seen = datetime.now(UTC)
        return True

    async def expire(self, session_id: str) -> bool:
        if session_id not in self._sessions:
            return False
        del self._sessions[session_id]
        logger.info("Session removed", extra={"session_id": session_id[:8]})
        return True

    def purge_expired(self) -> int:
        """Drop every expired session. Returns the number removed."""
        expired = [sid for sid, s in self._sessions.items() if self._is_expired(s)]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)


# Singleton instance for dependency injection
_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    """
    Get the session store singleton.

    Can be overridden via set_session_store for testing.
    """
    global _store
    if _store is None:
        config = get_config()
        _store = InMemorySessionStore(max_idle=timedelta(seconds=config.session_max_age))
        logger.info("Using in-memory session store")
    return _store


def set_session_store(store: SessionStore) -> None:
    """Set the session store implementation."""
    global _store
    _store = store


def reset_session_store() -> None:
    """
    Reset the session store singleton.

    Useful for testing to ensure clean state between tests.
    """
    global _store
    _store = None
