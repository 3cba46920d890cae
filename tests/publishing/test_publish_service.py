"""
Tests for the publish service.
"""

import pytest

from relay.core.domain import Platform, PublishReceipt, PublishRequest, Session, TokenSet
from relay.core.exceptions import UnauthenticatedError
from relay.publishing.service import PublishService


class RecordingPublisher:
    def __init__(self, platform):
        self.platform = platform
        self.calls = []

    async def publish(self, access_token, request):
        self.calls.append((access_token, request))
        return PublishReceipt(platform=self.platform, result={"id": "1"})


@pytest.fixture
def publishers():
    return {
        Platform.TWITTER: RecordingPublisher(Platform.TWITTER),
        Platform.LINKEDIN: RecordingPublisher(Platform.LINKEDIN),
    }


@pytest.mark.asyncio
async def test_publish_without_token_makes_no_call(publishers):
    service = PublishService(publishers)

    with pytest.raises(UnauthenticatedError):
        await service.publish(
            Platform.TWITTER, Session(session_id="sid"), PublishRequest(title="Hi")
        )

    assert publishers[Platform.TWITTER].calls == []


@pytest.mark.asyncio
async def test_token_of_other_platform_is_not_used(publishers):
    session = Session(session_id="sid")
    session.tokens[Platform.LINKEDIN] = TokenSet(access_token="t2")

    with pytest.raises(UnauthenticatedError):
        await PublishService(publishers).publish(
            Platform.TWITTER, session, PublishRequest(title="Hi")
        )


@pytest.mark.asyncio
async def test_publish_uses_platform_token(publishers):
    session = Session(session_id="sid")
    session.tokens[Platform.TWITTER] = TokenSet(access_token="t1")

    receipt = await PublishService(publishers).publish(
        Platform.TWITTER, session, PublishRequest(title="Hi")
    )

    assert receipt.result == {"id": "1"}
    assert publishers[Platform.TWITTER].calls[0][0] == "t1"
    assert publishers[Platform.LINKEDIN].calls == []
