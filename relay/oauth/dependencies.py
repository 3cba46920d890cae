"""
FastAPI dependencies for OAuth endpoints.

Provides dependency injection for the configured providers and the
authorization service.
"""

import logging
from typing import Annotated

from fastapi import Depends

from relay.config import RelayConfig, get_config
from relay.core.domain import Platform
from relay.core.ports import OAuthProvider
from relay.oauth.providers import create_providers
from relay.oauth.service import AuthorizationService
from relay.sessions.dependencies import Store


logger = logging.getLogger(__name__)


def get_providers(
    config: Annotated[RelayConfig, Depends(get_config)],
) -> dict[Platform, OAuthProvider]:
    """Provide the configured OAuth providers."""
    return create_providers(config)


def get_authorization_service(
    providers: Annotated[dict[Platform, OAuthProvider], Depends(get_providers)],
    store: Store,
) -> AuthorizationService:
    """
    Provide the authorization service dependency.

    This is where the core service is wired with its infrastructure.
    """
    return AuthorizationService(providers=providers, store=store)


AuthService = Annotated[AuthorizationService, Depends(get_authorization_service)]
Config = Annotated[RelayConfig, Depends(get_config)]
