"""
Tests for the backend API client
================================

Requests are answered by an httpx.MockTransport.
"""

import json

import httpx
import pytest

from virtuohub.shared.domain.auth import User
from virtuohub.shared.domain.intents import AddCommentPayload, CastVotePayload, CreatePostPayload
from virtuohub.shared.infrastructure.api import ApiError, VirtuoHubApiClient


def _client(handler, token=None):
    requests = []

    def _record(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    client = VirtuoHubApiClient(
        "http://api.test/",
        token_provider=lambda: token,
        transport=httpx.MockTransport(_record),
    )
    return client, requests


class TestActionEndpoints:

    @pytest.mark.asyncio
    async def test_cast_vote(self):
        client, requests = _client(lambda r: httpx.Response(200, json={"ok": True}), token="tok")
        result = await client.cast_vote(CastVotePayload(poll_id="P1", option_index=1))

        assert result == {"ok": True}
        request = requests[0]
        assert request.method == "POST"
        assert request.url == "http://api.test/api/posts/P1/vote"
        assert json.loads(request.content) == {"optionIndex": 1}
        assert request.headers["Authorization"] == "Bearer tok"
        await client.aclose()

    @pytest.mark.asyncio
    async def test_add_comment(self):
        client, requests = _client(lambda r: httpx.Response(201, json={"id": "c1"}))
        await client.add_comment(AddCommentPayload(post_id="post-1", comment_text="hi", comment_images=("a.png",)))

        assert requests[0].url.path == "/api/posts/post-1/comment"
        assert json.loads(requests[0].content) == {"commentText": "hi", "commentImages": ["a.png"]}
        assert "Authorization" not in requests[0].headers
        await client.aclose()

    @pytest.mark.asyncio
    async def test_create_thread(self):
        client, requests = _client(lambda r: httpx.Response(201, json={"id": "p1"}))
        await client.create_post(CreatePostPayload(category="wip", title="t", body="b"))

        assert requests[0].url.path == "/api/posts"
        assert json.loads(requests[0].content) == {"category": "wip", "subtype": "thread", "title": "t", "body": "b"}
        await client.aclose()

    @pytest.mark.asyncio
    async def test_create_poll_sends_options(self):
        client, requests = _client(lambda r: httpx.Response(201, json={"id": "p1"}))
        await client.create_post(
            CreatePostPayload(category="general", subtype="poll", title="t", body="", poll_options=("A", "B"))
        )
        assert json.loads(requests[0].content)["subtypeData"] == {"options": ["A", "B"]}
        await client.aclose()

    @pytest.mark.asyncio
    async def test_upsert_profile(self):
        client, requests = _client(lambda r: httpx.Response(204))
        user = User(id="u1", email="u1@example.com", user_metadata={"full_name": "Ada"})
        assert await client.upsert_profile(user) is None
        assert json.loads(requests[0].content) == {"id": "u1", "display_name": "Ada"}
        await client.aclose()


class TestFeed:

    @pytest.mark.asyncio
    async def test_list_posts_with_category(self):
        client, requests = _client(lambda r: httpx.Response(200, json=[{"id": "p1"}]))
        posts = await client.list_posts("wip")
        assert posts == [{"id": "p1"}]
        assert requests[0].method == "GET"
        assert requests[0].url.params["category"] == "wip"
        await client.aclose()

    @pytest.mark.asyncio
    async def test_all_category_not_sent(self):
        client, requests = _client(lambda r: httpx.Response(200, json=[]))
        assert await client.list_posts("All") == []
        assert "category" not in requests[0].url.params
        await client.aclose()


class TestErrors:

    @pytest.mark.asyncio
    async def test_server_message_carried(self):
        client, _ = _client(lambda r: httpx.Response(400, json={"message": "Poll is closed"}))
        with pytest.raises(ApiError) as exc_info:
            await client.cast_vote(CastVotePayload(poll_id="P1", option_index=0))
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Poll is closed"
        await client.aclose()

    @pytest.mark.asyncio
    async def test_plain_text_error(self):
        client, _ = _client(lambda r: httpx.Response(500, text="upstream down"))
        with pytest.raises(ApiError) as exc_info:
            await client.list_posts()
        assert exc_info.value.message == "upstream down"
        await client.aclose()

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        def _fail(request):
            raise httpx.ConnectError("refused", request=request)

        client, _ = _client(_fail)
        with pytest.raises(ApiError) as exc_info:
            await client.cast_vote(CastVotePayload(poll_id="P1", option_index=0))
        assert exc_info.value.status_code is None
        await client.aclose()
