"""
Core domain models for the OAuth relay.

These models represent the session-bound credential lifecycle and are
independent of the HTTP layer and of any provider SDK.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Platform(str, Enum):
    """Supported social platforms."""

    TWITTER = "twitter"
    LINKEDIN = "linkedin"


class PendingAuth(BaseModel):
    """
    Authorization started but not yet completed for one platform.

    Written by the link generator, consumed by the callback exchanger.
    """

    state: str = Field(description="Anti-forgery state sent to the provider")
    code_verifier: str | None = Field(
        default=None, description="PKCE code verifier (PKCE platforms only)"
    )
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class TokenSet(BaseModel):
    """
    OAuth2 credential obtained from a provider's token endpoint.
    """

    access_token: str = Field(description="OAuth2 access token")
    refresh_token: str | None = Field(default=None, description="Refresh token")
    token_type: str = Field(default="Bearer", description="Token type")
    expires_at: int | None = Field(
        default=None, description="Token expiration timestamp (Unix epoch)"
    )
    scope: str | None = Field(default=None, description="Space-separated scopes")
    obtained_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def from_token_response(cls, token_data: dict[str, Any]) -> "TokenSet":
        """
        Create a TokenSet from a token endpoint response.

        Args:
            token_data: Token dict as returned by authlib

        Returns:
            TokenSet instance
        """
        expires_at = token_data.get("expires_at")
        return cls(
            access_token=token_data["access_token"],
            refresh_token=token_data.get("refresh_token"),
            token_type=token_data.get("token_type") or "Bearer",
            expires_at=int(expires_at) if expires_at is not None else None,
            scope=token_data.get("scope"),
        )


class Session(BaseModel):
    """
    One browser's interaction lifecycle.

    Pending authorizations and tokens are kept in separate per-platform maps
    so fields of one platform can never be mistaken for another's.
    """

    session_id: str = Field(description="Opaque session identifier")
    pending: dict[Platform, PendingAuth] = Field(default_factory=dict)
    tokens: dict[Platform, TokenSet] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    last_seen: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def get_token(self, platform: Platform) -> TokenSet | None:
        """Get the token for a platform, if authorized."""
        return self.tokens.get(platform)

    def is_authenticated(self, platform: Platform) -> bool:
        return platform in self.tokens

    def connected_platforms(self) -> list[str]:
        """List platforms holding a token, in a stable order."""
        return [p.value for p in Platform if p in self.tokens]


class AuthorizationRequest(BaseModel):
    """Result of starting an authorization: where to send the browser."""

    platform: Platform
    authorization_url: str
    state: str
    code_verifier: str | None = None


class PublishRequest(BaseModel):
    """Content submitted by the client for publishing."""

    title: str = Field(description="Post text / article title")
    description: str | None = Field(default=None, description="Media description")
    url: str | None = Field(default=None, description="Link to share")


class PublishReceipt(BaseModel):
    """Provider's response to a successful publish call."""

    platform: Platform
    result: dict[str, Any] = Field(default_factory=dict)
