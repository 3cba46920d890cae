"""
Port definitions (interfaces) for the core domain.

Ports define the contracts between the core services and external systems.
Infrastructure adapters implement these ports.
"""

from typing import Any, Protocol

from relay.core.domain import Platform, PublishReceipt, PublishRequest, Session


class SessionStore(Protocol):
    """
    Port for per-visitor session persistence.

    Implementations must provide read-your-writes consistency per session id
    and treat entries idle for longer than their inactivity window as absent.
    """

    async def get(self, session_id: str) -> Session | None:
        """
        Load a session.

        Args:
            session_id: Opaque session identifier from the cookie

        Returns:
            Session if present and not expired, None otherwise
        """
        ...

    async def put(self, session: Session) -> None:
        """
        Commit a session.

        Raises:
            SessionCommitError: If the write could not be made durable
        """
        ...

    async def touch(self, session_id: str) -> bool:
        """Refresh the inactivity window. Returns False if unknown."""
        ...

    async def expire(self, session_id: str) -> bool:
        """Remove a session. Returns False if unknown."""
        ...


class OAuthProvider(Protocol):
    """Port for a provider's authorization and token endpoints."""

    platform: Platform
    uses_pkce: bool

    async def create_authorization_url(
        self, state: str, code_verifier: str | None = None
    ) -> str:
        """Build the provider's authorization URL."""
        ...

    async def exchange_code(
        self, code: str, code_verifier: str | None = None
    ) -> dict[str, Any]:
        """Exchange an authorization code for a token response."""
        ...


class Publisher(Protocol):
    """Port for a platform's content-creation API."""

    platform: Platform

    async def publish(
        self, access_token: str, request: PublishRequest
    ) -> PublishReceipt:
        """
        Submit one post on behalf of the token's owner.

        Raises:
            PublishRejectedError: On any non-success provider response
        """
        ...
