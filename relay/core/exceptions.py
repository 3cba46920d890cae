"""
Domain exceptions for the OAuth relay.

Authorization errors are returned as part of an outcome by the callback
exchanger and turned into a redirect by the router. Publish errors are
raised and translated into JSON responses.
"""

from typing import Any


class RelayError(Exception):
    """Base exception for relay errors."""

    pass


class SessionCommitError(RelayError):
    """
    Raised when a session write could not be committed.

    The HTTP layer must not hand out anything that depends on the lost write.
    """

    pass


class ProviderNotConfiguredError(RelayError):
    """Raised when a platform has no client credentials configured."""

    pass


class AuthError(RelayError):
    """Base exception for authorization-flow failures."""

    pass


class NoPendingRequestError(AuthError):
    """Callback arrived for a platform with no authorization in progress."""

    pass


class StateMismatchError(AuthError):
    """Returned anti-forgery state does not match the stored one."""

    pass


class ProviderRejectedError(AuthError):
    """The provider refused the authorization or the code exchange."""

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.details = details


class PublishError(RelayError):
    """Base exception for publish failures."""

    pass


class UnauthenticatedError(PublishError):
    """The session holds no access token for the platform."""

    pass


class PublishRejectedError(PublishError):
    """
    The provider answered a publish call with a non-success status.

    Carries the provider's status code and response body so they can be
    surfaced to the caller unchanged.
    """

    def __init__(self, message: str, status_code: int, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
