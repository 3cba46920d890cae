"""
Core service for the OAuth 2.0 authorization-code flow.

begin_authorization records anti-forgery state (and a PKCE verifier where the
platform supports it) in the session. complete_authorization validates the
provider's redirect against that state and exchanges the code for tokens.
"""

import hmac
import logging
from collections.abc import Callable
from dataclasses import dataclass

import httpx
from authlib.common.security import generate_token
from authlib.integrations.base_client import OAuthError

from relay.core.domain import (
    AuthorizationRequest,
    PendingAuth,
    Platform,
    Session,
    TokenSet,
)
from relay.core.exceptions import (
    AuthError,
    NoPendingRequestError,
    ProviderNotConfiguredError,
    ProviderRejectedError,
    SessionCommitError,
    StateMismatchError,
)
from relay.core.ports import OAuthProvider, SessionStore


logger = logging.getLogger(__name__)

STATE_LENGTH = 32
# RFC 7636 requires 43-128 characters
CODE_VERIFIER_LENGTH = 64


@dataclass
class AuthOutcome:
    """Result of completing an authorization: a token or an error, never both."""

    platform: Platform
    token: TokenSet | None = None
    error: AuthError | SessionCommitError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class AuthorizationService:
    """
    Runs the authorization-code flow for every configured platform.
    """

    def __init__(self, providers: dict[Platform, OAuthProvider], store: SessionStore):
        self._providers = providers
        self._store = store

    def _provider(self, platform: Platform) -> OAuthProvider:
        provider = self._providers.get(platform)
        if provider is None:
            raise ProviderNotConfiguredError(
                f"Platform '{platform.value}' is not configured"
            )
        return provider

    async def begin_authorization(
        self, platform: Platform, session: Session
    ) -> AuthorizationRequest:
        """
        Start authorization for a platform.

        Overwrites any pending authorization for the platform and commits the
        session before returning, so the returned URL is always backed by
        durably stored state.

        Raises:
            ProviderNotConfiguredError: If the platform has no credentials
            SessionCommitError: If the session could not be stored
        """
        provider = self._provider(platform)

        state = generate_token(STATE_LENGTH)
        code_verifier = generate_token(CODE_VERIFIER_LENGTH) if provider.uses_pkce else None

        url = await provider.create_authorization_url(
            state=state, code_verifier=code_verifier
        )

        pending = PendingAuth(state=state, code_verifier=code_verifier)

        def record_pending(target: Session) -> None:
            target.pending[platform] = pending

        await self._commit(session, record_pending)

        logger.info(
            f"Started {platform.value} authorization",
            extra={"platform": platform.value},
        )
        return AuthorizationRequest(
            platform=platform,
            authorization_url=url,
            state=state,
            code_verifier=code_verifier,
        )

    async def complete_authorization(
        self,
        platform: Platform,
        session: Session,
        code: str | None,
        returned_state: str | None,
        error: str | None = None,
    ) -> AuthOutcome:
        """
        Complete authorization from the provider's redirect.

        On failure the pending state is left as it was and no token is stored.

        Args:
            platform: Platform the redirect belongs to
            session: Caller's session
            code: Authorization code from the redirect
            returned_state: State parameter from the redirect
            error: Error code the provider put on the redirect, if any

        Returns:
            AuthOutcome holding either the stored TokenSet or the error
        """
        pending = session.pending.get(platform)
        if pending is None:
            return self._fail(
                platform, NoPendingRequestError(f"No pending {platform.value} authorization")
            )

        if returned_state is None or not hmac.compare_digest(
            pending.state.encode(), returned_state.encode()
        ):
            return self._fail(
                platform, StateMismatchError("Returned state does not match session state")
            )

        if error or not code:
            return self._fail(
                platform,
                ProviderRejectedError(
                    "Provider did not return an authorization code",
                    details=error,
                ),
            )

        provider = self._providers.get(platform)
        if provider is None:
            return self._fail(
                platform, ProviderRejectedError(f"Platform '{platform.value}' is not configured")
            )

        try:
            token_data = await provider.exchange_code(code, pending.code_verifier)
            token = TokenSet.from_token_response(token_data)
        except OAuthError as e:
            return self._fail(
                platform,
                ProviderRejectedError(
                    "Token endpoint returned an error",
                    details={"error": e.error, "description": e.description},
                ),
            )
        except httpx.HTTPError as e:
            return self._fail(
                platform, ProviderRejectedError(f"Token request failed: {e}", details=str(e))
            )
        except (KeyError, ValueError) as e:
            # Non-JSON body or a payload without access_token
            return self._fail(
                platform,
                ProviderRejectedError(f"Malformed token response: {e}", details=str(e)),
            )

        def record_token(target: Session) -> None:
            target.tokens[platform] = token
            target.pending.pop(platform, None)

        try:
            await self._commit(session, record_token)
        except SessionCommitError as e:
            logger.error(
                f"Failed to commit {platform.value} token: {e}",
                extra={"platform": platform.value},
            )
            return AuthOutcome(platform=platform, error=e)

        logger.info(
            f"Successfully connected {platform.value}",
            extra={"platform": platform.value},
        )
        return AuthOutcome(platform=platform, token=token)

    async def logout(self, session: Session) -> bool:
        """Forget every pending authorization and token held by the session."""
        return await self._store.expire(session.session_id)

    async def _commit(
        self, session: Session, change: Callable[[Session], None]
    ) -> None:
        """
        Apply one platform's change and store it.

        The change is replayed onto the latest stored copy so a concurrent
        request that committed another platform's state is not overwritten.
        """
        change(session)
        latest = await self._store.get(session.session_id)
        if latest is None:
            await self._store.put(session)
            return
        change(latest)
        await self._store.put(latest)

    def _fail(self, platform: Platform, error: AuthError) -> AuthOutcome:
        logger.warning(
            f"{platform.value} authorization failed: {error}",
            extra={"platform": platform.value, "reason": type(error).__name__},
        )
        return AuthOutcome(platform=platform, error=error)
