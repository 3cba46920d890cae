"""
Twitter/X publisher.

Posts the title as the entire tweet text through the v2 tweets endpoint.
"""

import logging

import httpx

from relay.core.domain import Platform, PublishReceipt, PublishRequest
from relay.core.exceptions import PublishRejectedError
from relay.core.ports import Publisher
from relay.publishing.http import as_result, response_body


logger = logging.getLogger(__name__)


class TwitterPublisher(Publisher):
    """Publisher for the Twitter API v2."""

    platform = Platform.TWITTER
    BASE_URL = "https://api.twitter.com/2"

    def __init__(self, timeout: float = 10.0):
        self._timeout = timeout

    async def publish(
        self, access_token: str, request: PublishRequest
    ) -> PublishReceipt:
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    f"{self.BASE_URL}/tweets",
                    headers=headers,
                    json={"text": request.title},
                )
        except httpx.RequestError as e:
            logger.error(f"Twitter network error: {e}")
            raise PublishRejectedError(
                f"Network error: {e}",
                status_code=502,
                body={"message": str(e)},
            ) from e

        body = response_body(response)
        if not response.is_success:
            logger.error(
                f"Twitter API error: {response.status_code}",
                extra={"platform": self.platform.value, "body": body},
            )
            raise PublishRejectedError(
                "Tweet request failed", status_code=response.status_code, body=body
            )

        logger.info("Published tweet", extra={"platform": self.platform.value})
        return PublishReceipt(platform=self.platform, result=as_result(body))
