"""
LinkedIn publisher.

Resolves the member's subject id from the OpenID userinfo endpoint, then
creates an ARTICLE share through the UGC posts API.
"""

import logging
from typing import Any

import httpx

from relay.core.domain import Platform, PublishReceipt, PublishRequest
from relay.core.exceptions import PublishRejectedError
from relay.core.ports import Publisher
from relay.publishing.http import as_result, response_body


logger = logging.getLogger(__name__)

RESTLI_PROTOCOL_VERSION = "2.0.0"


def build_share_payload(author_urn: str, request: PublishRequest) -> dict[str, Any]:
    """
    Build the UGC post body for an article share.

    Args:
        author_urn: Member URN, e.g. urn:li:person:abc
        request: Content submitted by the client

    Returns:
        JSON-serializable ugcPosts payload
    """
    return {
        "author": author_urn,
        "lifecycleState": "PUBLISHED",
        "specificContent": {
            "com.linkedin.ugc.ShareContent": {
                "shareCommentary": {"text": request.title},
                "shareMediaCategory": "ARTICLE",
                "media": [
                    {
                        "status": "READY",
                        "description": {"text": request.description or ""},
                        "originalUrl": request.url or "",
                        "title": {"text": request.title},
                    }
                ],
            }
        },
        "visibility": {"com.linkedin.ugc.MemberNetworkVisibility": "CONNECTIONS"},
    }


class LinkedInPublisher(Publisher):
    """Publisher for the LinkedIn v2 API."""

    platform = Platform.LINKEDIN
    BASE_URL = "https://api.linkedin.com/v2"

    def __init__(self, timeout: float = 10.0):
        self._timeout = timeout

    async def _request(
        self, client: httpx.AsyncClient, method: str, endpoint: str, **kwargs
    ) -> Any:
        """Make a request and raise PublishRejectedError on any failure."""
        try:
            response = await client.request(method, f"{self.BASE_URL}{endpoint}", **kwargs)
        except httpx.RequestError as e:
            logger.error(f"LinkedIn network error: {e}")
            raise PublishRejectedError(
                f"Network error: {e}", status_code=502, body={"message": str(e)}
            ) from e

        body = response_body(response)
        if not response.is_success:
            logger.error(
                f"LinkedIn API error on {endpoint}: {response.status_code}",
                extra={"platform": self.platform.value, "body": body},
            )
            raise PublishRejectedError(
                f"LinkedIn request to {endpoint} failed",
                status_code=response.status_code,
                body=body,
            )
        return body

    async def resolve_author_urn(self, client: httpx.AsyncClient) -> str:
        """Look up the authenticated member and build their person URN."""
        profile = await self._request(client, "GET", "/userinfo")
        subject = None
        if isinstance(profile, dict):
            subject = profile.get("sub") or profile.get("id")
        if not subject:
            raise PublishRejectedError(
                "LinkedIn profile has no subject id", status_code=502, body=profile
            )
        return f"urn:li:person:{subject}"

    async def publish(
        self, access_token: str, request: PublishRequest
    ) -> PublishReceipt:
        headers = {"Authorization": f"Bearer {access_token}"}

        async with httpx.AsyncClient(timeout=self._timeout, headers=headers) as client:
            author_urn = await self.resolve_author_urn(client)
            payload = build_share_payload(author_urn, request)
            result = await self._request(
                client,
                "POST",
                "/ugcPosts",
                json=payload,
                headers={"X-Restli-Protocol-Version": RESTLI_PROTOCOL_VERSION},
            )

        logger.info("Published LinkedIn share", extra={"platform": self.platform.value})
        return PublishReceipt(platform=self.platform, result=as_result(result))
