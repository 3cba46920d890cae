"""
Core service for publishing content on behalf of an authenticated session.
"""

import logging

from relay.core.domain import Platform, PublishReceipt, PublishRequest, Session
from relay.core.exceptions import UnauthenticatedError
from relay.core.ports import Publisher


logger = logging.getLogger(__name__)


class PublishService:
    """
    Dispatches publish requests to the platform's publisher.

    Makes exactly one publish attempt per call: no retries, no deduplication.
    """

    def __init__(self, publishers: dict[Platform, Publisher]):
        self._publishers = publishers

    async def publish(
        self, platform: Platform, session: Session, request: PublishRequest
    ) -> PublishReceipt:
        """
        Publish content using the session's token for a platform.

        Args:
            platform: Target platform
            session: Caller's session
            request: Content to publish

        Returns:
            PublishReceipt with the provider's response

        Raises:
            UnauthenticatedError: If the session holds no token for the platform
            PublishRejectedError: If the provider rejects the request
        """
        if not session.is_authenticated(platform):
            logger.warning(
                f"Publish to {platform.value} without a token",
                extra={"platform": platform.value},
            )
            raise UnauthenticatedError(f"Not authenticated for {platform.value}")

        publisher = self._publishers[platform]
        token = session.get_token(platform)
        return await publisher.publish(token.access_token, request)
