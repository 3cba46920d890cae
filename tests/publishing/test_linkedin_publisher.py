"""
Unit tests for the LinkedIn publisher.
"""

import json

import httpx
import pytest
from respx import MockRouter

from relay.core.domain import Platform, PublishRequest
from relay.core.exceptions import PublishRejectedError
from relay.publishing.linkedin import LinkedInPublisher, build_share_payload

USERINFO_URL = "https://api.linkedin.com/v2/userinfo"
UGC_POSTS_URL = "https://api.linkedin.com/v2/ugcPosts"


class TestBuildSharePayload:
    """Tests for build_share_payload."""

    def test_defaults_for_missing_description_and_url(self):
        payload = build_share_payload("urn:li:person:abc", PublishRequest(title="Hello"))

        content = payload["specificContent"]["com.linkedin.ugc.ShareContent"]
        media = content["media"][0]
        assert payload["author"] == "urn:li:person:abc"
        assert payload["lifecycleState"] == "PUBLISHED"
        assert content["shareCommentary"]["text"] == "Hello"
        assert content["shareMediaCategory"] == "ARTICLE"
        assert media["status"] == "READY"
        assert media["description"]["text"] == ""
        assert media["originalUrl"] == ""
        assert media["title"]["text"] == "Hello"
        assert payload["visibility"] == {
            "com.linkedin.ugc.MemberNetworkVisibility": "CONNECTIONS"
        }

    def test_description_and_url(self):
        payload = build_share_payload(
            "urn:li:person:abc",
            PublishRequest(title="T", description="D", url="https://example.com/a"),
        )

        media = payload["specificContent"]["com.linkedin.ugc.ShareContent"]["media"][0]
        assert media["description"]["text"] == "D"
        assert media["originalUrl"] == "https://example.com/a"


class TestLinkedInPublisher:
    """Tests for LinkedInPublisher."""

    @pytest.mark.asyncio
    async def test_publish_resolves_author_and_posts_share(self, respx_mock: MockRouter):
        profile_route = respx_mock.get(USERINFO_URL).mock(
            return_value=httpx.Response(200, json={"sub": "abc", "name": "Ada"})
        )
        post_route = respx_mock.post(UGC_POSTS_URL).mock(
            return_value=httpx.Response(201, json={"id": "urn:li:share:1"})
        )

        receipt = await LinkedInPublisher().publish("t2", PublishRequest(title="Hello"))

        assert receipt.platform == Platform.LINKEDIN
        assert receipt.result == {"id": "urn:li:share:1"}
        assert profile_route.calls.last.request.headers["Authorization"] == "Bearer t2"
        request = post_route.calls.last.request
        assert request.headers["Authorization"] == "Bearer t2"
        assert request.headers["X-Restli-Protocol-Version"] == "2.0.0"
        payload = json.loads(request.content)
        assert payload["author"] == "urn:li:person:abc"

    @pytest.mark.asyncio
    async def test_profile_id_fallback(self, respx_mock: MockRouter):
        respx_mock.get(USERINFO_URL).mock(return_value=httpx.Response(200, json={"id": "xyz"}))
        post_route = respx_mock.post(UGC_POSTS_URL).mock(
            return_value=httpx.Response(201, json={"id": "urn:li:share:2"})
        )

        await LinkedInPublisher().publish("t2", PublishRequest(title="Hello"))

        assert json.loads(post_route.calls.last.request.content)["author"] == "urn:li:person:xyz"

    @pytest.mark.asyncio
    async def test_profile_lookup_failure(self, respx_mock: MockRouter):
        respx_mock.get(USERINFO_URL).mock(
            return_value=httpx.Response(401, json={"message": "Invalid access token"})
        )

        with pytest.raises(PublishRejectedError) as exc_info:
            await LinkedInPublisher().publish("expired", PublishRequest(title="Hello"))

        assert exc_info.value.status_code == 401
        assert exc_info.value.body == {"message": "Invalid access token"}

    @pytest.mark.asyncio
    async def test_profile_without_subject(self, respx_mock: MockRouter):
        respx_mock.get(USERINFO_URL).mock(return_value=httpx.Response(200, json={}))

        with pytest.raises(PublishRejectedError, match="no subject"):
            await LinkedInPublisher().publish("t2", PublishRequest(title="Hello"))

    @pytest.mark.asyncio
    async def test_share_rejected(self, respx_mock: MockRouter):
        respx_mock.get(USERINFO_URL).mock(return_value=httpx.Response(200, json={"sub": "abc"}))
        respx_mock.post(UGC_POSTS_URL).mock(
            return_value=httpx.Response(422, json={"message": "Invalid URL"})
        )

        with pytest.raises(PublishRejectedError) as exc_info:
            await LinkedInPublisher().publish("t2", PublishRequest(title="Hello", url="nope"))

        assert exc_info.value.status_code == 422
        assert exc_info.value.body == {"message": "Invalid URL"}
