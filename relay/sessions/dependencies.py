"""
FastAPI dependencies for session access.

The signed Starlette session cookie carries only an opaque session id.
Everything else lives server-side in the SessionStore.
"""

import logging
import secrets
from typing import Annotated

from fastapi import Depends, Request

from relay.core.domain import Session
from relay.core.ports import SessionStore
from relay.sessions.store import get_session_store


logger = logging.getLogger(__name__)

SESSION_ID_KEY = "sid"


def get_session_id(request: Request) -> str:
    """
    Get the caller's session id, issuing a new one if absent.

    The id is written into the cookie-backed session; SessionMiddleware sends
    the cookie with the response.
    """
    session_id = request.session.get(SESSION_ID_KEY)
    if not session_id:
        session_id = secrets.token_urlsafe(32)
        request.session[SESSION_ID_KEY] = session_id
        logger.debug("Issued new session id")
    return session_id


async def get_session(
    request: Request,
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> Session:
    """
    Load the caller's session, creating it lazily.

    A new session is not stored until a service commits it.
    """
    session_id = get_session_id(request)
    session = await store.get(session_id)
    if session is None:
        return Session(session_id=session_id)
    await store.touch(session_id)
    return session


Store = Annotated[SessionStore, Depends(get_session_store)]
CurrentSession = Annotated[Session, Depends(get_session)]
