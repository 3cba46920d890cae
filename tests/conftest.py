"""
Shared test configuration and fixtures.
"""

import os
from datetime import timedelta
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

TEST_ENV = {
    "SESSION_SECRET": "test-secret",
    "ORIGIN": "http://localhost:5173",
    "TWITTER_CLIENT_ID": "test-twitter-id",
    "TWITTER_CLIENT_SECRET": "test-twitter-secret",
    "CALLBACK_URL": "http://testserver/callback",
    "LINKEDIN_CLIENT_ID": "test-linkedin-id",
    "LINKEDIN_CLIENT_SECRET": "test-linkedin-secret",
    "LINKEDIN_CALLBACK_URL": "http://testserver/callback/linkedin",
}

# Set environment variables before importing app (config is read at import)
with patch.dict(os.environ, TEST_ENV):
    from relay.config import get_config

    get_config.cache_clear()
    from relay.main import app

from relay.core.domain import Platform, Session, TokenSet  # noqa: E402
from relay.sessions.store import InMemorySessionStore, get_session_store  # noqa: E402


@pytest.fixture
def store():
    """
    Fresh in-memory session store wired into the app for each test.
    """
    session_store = InMemorySessionStore(max_idle=timedelta(hours=24))
    app.dependency_overrides[get_session_store] = lambda: session_store
    yield session_store
    app.dependency_overrides.pop(get_session_store, None)


@pytest.fixture
def client(store):
    """Test client with its own cookie jar."""
    with TestClient(app) as test_client:
        yield test_client


def _only_session(store: InMemorySessionStore) -> Session:
    sessions = list(store._sessions.values())
    assert len(sessions) == 1, f"expected one session, found {len(sessions)}"
    return sessions[0]


@pytest.fixture
def stored_session(store):
    """Callable returning the single session committed to the store."""
    return lambda: _only_session(store)


@pytest.fixture
def authenticate(client, store):
    """
    Give the test client's session a token for a platform.

    Starts an authorization through the API so the session cookie and the
    stored session line up, then plants the token directly.
    """

    def _authenticate(platform: Platform, access_token: str) -> Session:
        response = client.get(f"/auth/{platform.value}")
        assert response.status_code == 200
        session = _only_session(store)
        session.tokens[platform] = TokenSet(access_token=access_token)
        return session

    return _authenticate
