"""
Tests for the comment box
=========================
"""

import pytest

from conftest import make_session
from virtuohub.client.controllers import CommentController
from virtuohub.shared.domain.intents import AddCommentPayload, add_comment_intent
from virtuohub.shared.infrastructure.api import ApiError


class TestCommentSubmit:

    def test_empty_comment_ignored(self, store, modal):
        box = CommentController(store, "post-1")
        assert box.submit("   ") is False
        assert store.intents.intent is None
        assert modal.modes == []

    def test_image_only_comment_allowed(self, store):
        box = CommentController(store, "post-1")
        box.submit("", images=["https://cdn/img.png"])
        assert store.intents.intent == add_comment_intent("post-1", "", ("https://cdn/img.png",))

    def test_guest_comment_captured(self, store, modal):
        box = CommentController(store, "post-1")
        box.start()
        assert box.submit("  Love the lighting ") is False
        assert store.intents.intent.to_wire() == {
            "action": "add_comment",
            "data": {"postId": "post-1", "commentText": "Love the lighting", "commentImages": []},
        }
        assert modal.modes == ["signin"]

    def test_handler_is_scoped_to_post(self, store):
        box = CommentController(store, "post-1")
        box.start()
        other = add_comment_intent("post-2", "hi")
        mine = add_comment_intent("post-1", "hi")
        assert store.registry.handlers_for(other.action, other.data) == []
        assert len(store.registry.handlers_for(mine.action, mine.data)) == 1

    @pytest.mark.asyncio
    async def test_replay_reaches_only_target_thread(self, store, mock_api):
        first = CommentController(store, "post-1")
        second = CommentController(store, "post-2")
        first.start()
        second.start()

        second.submit("Great breakdown")
        store.auth.set_session(make_session())
        await store.tasks.wait_until_idle()

        mock_api.add_comment.assert_awaited_once_with(
            AddCommentPayload(post_id="post-2", comment_text="Great breakdown")
        )
        assert second.comment_count == 1
        assert first.comment_count == 0

    @pytest.mark.asyncio
    async def test_signed_in_comment_sent(self, store, mock_api):
        store.auth.set_session(make_session())
        box = CommentController(store, "post-1")

        assert box.submit("Nice") is True
        assert box.sending
        assert box.submit("Again") is False
        await store.tasks.wait_until_idle()

        assert mock_api.add_comment.await_count == 1
        assert not box.sending

    @pytest.mark.asyncio
    async def test_failure_toasts(self, store, mock_api):
        store.auth.set_session(make_session())
        mock_api.add_comment.side_effect = ApiError("Post not found", 404)
        box = CommentController(store, "post-1")

        box.submit("Nice")
        await store.tasks.wait_until_idle()

        assert box.comment_count == 0
        assert store.app.last_toast["title"] == "Failed to add comment"
        assert store.app.last_toast["description"] == "Post not found"
