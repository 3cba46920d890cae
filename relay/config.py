"""
Relay configuration.

Loaded once from environment variables and injected into services through
FastAPI dependencies. Each platform can be configured independently.
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from relay.core.domain import Platform


logger = logging.getLogger(__name__)

# Session lifetime: 24 hours (in seconds)
DEFAULT_SESSION_MAX_AGE = 60 * 60 * 24


@dataclass
class RelayConfig:
    """
    Relay configuration settings.

    Loaded from environment variables. Call validate() at startup to fail fast.
    """

    session_secret: str | None
    origin: str | None = None

    twitter_client_id: str | None = None
    twitter_client_secret: str | None = None
    twitter_callback_url: str | None = None

    linkedin_client_id: str | None = None
    linkedin_client_secret: str | None = None
    linkedin_callback_url: str | None = None

    environment: str = "development"
    session_max_age: int = DEFAULT_SESSION_MAX_AGE
    http_timeout: float = 10.0
    callback_page: str = "/callback.html"
    static_dir: str = "public"

    @classmethod
    def from_env(cls) -> "RelayConfig":
        """Load configuration from environment variables."""
        return cls(
            session_secret=os.getenv("SESSION_SECRET"),
            origin=os.getenv("ORIGIN"),
            twitter_client_id=os.getenv("TWITTER_CLIENT_ID"),
            twitter_client_secret=os.getenv("TWITTER_CLIENT_SECRET"),
            twitter_callback_url=os.getenv("CALLBACK_URL"),
            linkedin_client_id=os.getenv("LINKEDIN_CLIENT_ID"),
            linkedin_client_secret=os.getenv("LINKEDIN_CLIENT_SECRET"),
            linkedin_callback_url=os.getenv("LINKEDIN_CALLBACK_URL"),
            environment=os.getenv("ENVIRONMENT", "development").lower(),
            session_max_age=int(
                os.getenv("SESSION_MAX_AGE", str(DEFAULT_SESSION_MAX_AGE))
            ),
            http_timeout=float(os.getenv("HTTP_TIMEOUT_SECONDS", "10")),
            callback_page=os.getenv("CALLBACK_PAGE", "/callback.html"),
            static_dir=os.getenv("STATIC_DIR", "public"),
        )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def allowed_origins(self) -> list[str]:
        """Origins allowed by CORS (comma-separated ORIGIN)."""
        if not self.origin:
            return []
        return [o.strip() for o in self.origin.split(",") if o.strip()]

    def get_callback_url(self, platform: Platform) -> str | None:
        """Redirect URI registered with the provider for a platform."""
        if platform == Platform.TWITTER:
            return self.twitter_callback_url
        return self.linkedin_callback_url

    def is_platform_configured(self, platform: Platform) -> bool:
        """Check if a platform has the settings needed to run the OAuth flow."""
        if platform == Platform.TWITTER:
            # Twitter allows public PKCE clients, so the secret is optional
            return bool(self.twitter_client_id and self.twitter_callback_url)
        return bool(
            self.linkedin_client_id
            and self.linkedin_client_secret
            and self.linkedin_callback_url
        )

    def get_configured_platforms(self) -> list[Platform]:
        """List all platforms with valid configuration."""
        return [p for p in Platform if self.is_platform_configured(p)]

    def validate(self) -> None:
        """Validate required configuration."""
        if not self.session_secret:
            raise ValueError("SESSION_SECRET is not set in the environment.")
        if self.session_max_age <= 0:
            raise ValueError("SESSION_MAX_AGE must be a positive number of seconds")
        if self.http_timeout <= 0:
            raise ValueError("HTTP_TIMEOUT_SECONDS must be positive")
        for platform in Platform:
            if not self.is_platform_configured(platform):
                logger.warning(
                    f"{platform.value} OAuth not configured (missing credentials)"
                )


@lru_cache()
def get_config() -> RelayConfig:
    """Get relay configuration singleton."""
    return RelayConfig.from_env()
