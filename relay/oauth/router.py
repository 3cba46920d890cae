"""
OAuth2 API endpoints.

- GET /auth/{twitter,linkedin} - Start OAuth flow, returns {"url": ...}
- GET /callback, /callback/linkedin - Handle provider redirect, store tokens
- GET /api/session - Which platforms the session is connected to
- POST /auth/logout - Forget the session

Flow-level failures always redirect to the configured failure page. Access
tokens stay in the server-side session and never appear in a URL.
"""

import asyncio
import logging
from urllib.parse import urlencode

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from relay.config import RelayConfig
from relay.core.domain import Platform, Session
from relay.core.exceptions import ProviderNotConfiguredError, SessionCommitError
from relay.oauth.dependencies import AuthService, Config
from relay.oauth.service import AuthorizationService
from relay.sessions.dependencies import SESSION_ID_KEY, CurrentSession


logger = logging.getLogger(__name__)

router = APIRouter(tags=["oauth"])


def _failure_redirect(config: RelayConfig) -> RedirectResponse:
    return RedirectResponse(url=config.callback_page, status_code=status.HTTP_302_FOUND)


def _success_redirect(config: RelayConfig, platform: Platform) -> RedirectResponse:
    query = urlencode({"connected": platform.value})
    return RedirectResponse(
        url=f"{config.callback_page}?{query}",
        status_code=status.HTTP_302_FOUND,
    )


async def _begin(
    platform: Platform,
    session: Session,
    service: AuthorizationService,
    config: RelayConfig,
):
    try:
        auth_request = await service.begin_authorization(platform, session)
    except ProviderNotConfiguredError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        )
    except SessionCommitError as e:
        logger.error(
            f"Session save error: {e}", extra={"platform": platform.value}
        )
        return _failure_redirect(config)

    return {"url": auth_request.authorization_url}


async def _complete(
    platform: Platform,
    request: Request,
    session: Session,
    service: AuthorizationService,
    config: RelayConfig,
):
    params = request.query_params

    # Let the exchange finish even if the browser goes away mid-request
    outcome = await asyncio.shield(
        service.complete_authorization(
            platform,
            session,
            code=params.get("code"),
            returned_state=params.get("state"),
            error=params.get("error"),
        )
    )

    if not outcome.ok:
        return _failure_redirect(config)
    return _success_redirect(config, platform)


@router.get("/auth/twitter")
async def begin_twitter(session: CurrentSession, service: AuthService, config: Config):
    """
    Generate the Twitter OAuth2 (PKCE) authorization link.

    The verifier and state are committed to the session before the URL is
    returned.
    """
    return await _begin(Platform.TWITTER, session, service, config)


@router.get("/callback")
async def twitter_callback(
    request: Request, session: CurrentSession, service: AuthService, config: Config
):
    """Handle the Twitter redirect: validate state, exchange code, store token."""
    return await _complete(Platform.TWITTER, request, session, service, config)


@router.get("/auth/linkedin")
async def begin_linkedin(session: CurrentSession, service: AuthService, config: Config):
    """Generate the LinkedIn OAuth2 authorization link."""
    return await _begin(Platform.LINKEDIN, session, service, config)


@router.get("/callback/linkedin")
async def linkedin_callback(
    request: Request, session: CurrentSession, service: AuthService, config: Config
):
    """Handle the LinkedIn redirect: validate state, exchange code, store token."""
    return await _complete(Platform.LINKEDIN, request, session, service, config)


@router.get("/api/session")
async def session_status(session: CurrentSession):
    """
    Report which platforms the caller's session is connected to.

    This is how the page learns that a callback succeeded; tokens themselves
    are never returned.
    """
    return {
        "status": "success",
        "connected": session.connected_platforms(),
    }


@router.post("/auth/logout")
async def logout(request: Request, session: CurrentSession, service: AuthService):
    """Drop the session and every token it holds."""
    removed = await service.logout(session)
    request.session.pop(SESSION_ID_KEY, None)

    logger.info("Session logged out", extra={"had_session": removed})
    return {"status": "success", "message": "Logged out"}
