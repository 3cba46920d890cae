"""
Publishing API endpoints.

- POST /api/tweet - Publish the title as a tweet
- POST /api/linkedin - Publish an article share on LinkedIn

Errors are returned as JSON because the caller is the page's own script.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from relay.config import RelayConfig, get_config
from relay.core.domain import Platform, PublishRequest
from relay.core.exceptions import PublishRejectedError, UnauthenticatedError
from relay.publishing.linkedin import LinkedInPublisher
from relay.publishing.service import PublishService
from relay.publishing.twitter import TwitterPublisher
from relay.sessions.dependencies import CurrentSession


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["publishing"])


def get_publish_service(
    config: Annotated[RelayConfig, Depends(get_config)],
) -> PublishService:
    """Provide the publish service with a publisher per platform."""
    return PublishService(
        publishers={
            Platform.TWITTER: TwitterPublisher(timeout=config.http_timeout),
            Platform.LINKEDIN: LinkedInPublisher(timeout=config.http_timeout),
        }
    )


Publishing = Annotated[PublishService, Depends(get_publish_service)]


@router.post("/tweet")
async def post_tweet(
    body: PublishRequest, session: CurrentSession, service: Publishing
):
    """
    Publish a tweet.

    Returns the Twitter API response unchanged. Provider errors are reported
    as 500 with the provider's status and body under "details".
    """
    try:
        receipt = await service.publish(Platform.TWITTER, session, body)
    except UnauthenticatedError:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"error": "Not authenticated"},
        )
    except PublishRejectedError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Tweet request failed",
                "details": {"status": e.status_code, "body": e.body},
            },
        )

    return receipt.result


@router.post("/linkedin")
async def post_linkedin(
    body: PublishRequest, session: CurrentSession, service: Publishing
):
    """
    Publish a LinkedIn article share.

    Provider errors are passed through with the provider's status code.
    """
    try:
        receipt = await service.publish(Platform.LINKEDIN, session, body)
    except UnauthenticatedError:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"error": "Not authenticated for LinkedIn"},
        )
    except PublishRejectedError as e:
        return JSONResponse(status_code=e.status_code, content={"error": e.body})

    return {"success": True, "result": receipt.result}
