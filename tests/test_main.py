"""
Tests for application start-up
==============================
"""

import pytest

from virtuohub.client.main import init_services
from virtuohub.shared.core import events
from virtuohub.shared.infrastructure.api import ApiError


async def _collect_feed(store):
    seen = []

    async def record(payload):
        seen.append(payload)

    await store.bus.subscribe(events.TOPIC_FEED_LOADED, record)
    return seen


class TestInitServices:

    @pytest.mark.asyncio
    async def test_feed_published(self, store, mock_api):
        posts = [{"id": "p1", "subtype": "thread", "title": "Hello"}]
        mock_api.list_posts.return_value = posts
        seen = await _collect_feed(store)

        await init_services(store)
        await store.bus.wait_until_idle()

        assert store.app.is_ready
        assert store.app.status_text == "Ready"
        assert seen == [{"posts": posts, "category": None}]

    @pytest.mark.asyncio
    async def test_feed_failure_publishes_empty_feed(self, store, mock_api):
        mock_api.list_posts.side_effect = ApiError("Service unavailable", 503)
        seen = await _collect_feed(store)

        await init_services(store)
        await store.bus.wait_until_idle()

        assert seen == [{"posts": [], "category": None}]
        assert store.app.last_toast["title"] == "Could not load posts"
