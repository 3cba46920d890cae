"""
OAuth 2.0 provider implementations.

Uses authlib's httpx integration to build authorization URLs (including the
PKCE S256 challenge) and to call token endpoints. A fresh client is created
for every call; no client state is shared across requests.
"""

import logging
from typing import Any

from authlib.integrations.httpx_client import AsyncOAuth2Client

from relay.config import RelayConfig
from relay.core.domain import Platform
from relay.core.ports import OAuthProvider


logger = logging.getLogger(__name__)


class AuthlibOAuthProvider(OAuthProvider):
    """Authorization-code provider backed by authlib's AsyncOAuth2Client."""

    platform: Platform
    uses_pkce: bool = False
    authorize_url: str
    access_token_url: str
    scopes: tuple[str, ...] = ()

    def __init__(
        self,
        client_id: str | None,
        client_secret: str | None,
        redirect_uri: str | None,
        timeout: float = 10.0,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.timeout = timeout

    @property
    def token_endpoint_auth_method(self) -> str:
        return "client_secret_basic" if self.client_secret else "none"

    def _client(self) -> AsyncOAuth2Client:
        return AsyncOAuth2Client(
            client_id=self.client_id,
            client_secret=self.client_secret,
            token_endpoint_auth_method=self.token_endpoint_auth_method,
            scope=" ".join(self.scopes),
            redirect_uri=self.redirect_uri,
            code_challenge_method="S256" if self.uses_pkce else None,
            timeout=self.timeout,
        )

    async def create_authorization_url(
        self, state: str, code_verifier: str | None = None
    ) -> str:
        async with self._client() as client:
            url, _ = client.create_authorization_url(
                self.authorize_url,
                state=state,
                code_verifier=code_verifier if self.uses_pkce else None,
            )
        return url

    async def exchange_code(
        self, code: str, code_verifier: str | None = None
    ) -> dict[str, Any]:
        """
        Exchange an authorization code at the token endpoint.

        Raises:
            authlib OAuthError: If the provider returns an error payload
            httpx.HTTPError: On transport failures or 5xx responses
        """
        params: dict[str, Any] = {"code": code, "redirect_uri": self.redirect_uri}
        if self.uses_pkce:
            params["code_verifier"] = code_verifier

        async with self._client() as client:
            token = await client.fetch_token(self.access_token_url, **params)

        logger.info(
            f"Exchanged authorization code for {self.platform.value} token",
            extra={"platform": self.platform.value},
        )
        return dict(token)


class TwitterOAuthProvider(AuthlibOAuthProvider):
    """OAuth 2.0 with PKCE for Twitter/X."""

    platform = Platform.TWITTER
    uses_pkce = True
    authorize_url = "https://twitter.com/i/oauth2/authorize"
    access_token_url = "https://api.twitter.com/2/oauth2/token"
    scopes = ("tweet.read", "tweet.write", "users.read", "offline.access")


class LinkedInOAuthProvider(AuthlibOAuthProvider):
    """OAuth 2.0 for LinkedIn (confidential client, credentials in body)."""

    platform = Platform.LINKEDIN
    uses_pkce = False
    authorize_url = "https://www.linkedin.com/oauth/v2/authorization"
    access_token_url = "https://www.linkedin.com/oauth/v2/accessToken"
    scopes = ("w_member_social", "openid", "profile", "email")

    @property
    def token_endpoint_auth_method(self) -> str:
        return "client_secret_post"


def create_providers(config: RelayConfig) -> dict[Platform, OAuthProvider]:
    """
    Create a provider for every configured platform.

    Platforms without credentials are skipped (allows partial configuration).
    """
    providers: dict[Platform, OAuthProvider] = {}

    if config.is_platform_configured(Platform.TWITTER):
        providers[Platform.TWITTER] = TwitterOAuthProvider(
            client_id=config.twitter_client_id,
            client_secret=config.twitter_client_secret,
            redirect_uri=config.get_callback_url(Platform.TWITTER),
            timeout=config.http_timeout,
        )

    if config.is_platform_configured(Platform.LINKEDIN):
        providers[Platform.LINKEDIN] = LinkedInOAuthProvider(
            client_id=config.linkedin_client_id,
            client_secret=config.linkedin_client_secret,
            redirect_uri=config.get_callback_url(Platform.LINKEDIN),
            timeout=config.http_timeout,
        )

    return providers
