"""
Tests for the Intent sum type
=============================

Wire form, parsing and payload constraints.
"""

import pytest
from pydantic import ValidationError

from virtuohub.shared.domain.intents import (
    AddComment,
    CastVote,
    CastVotePayload,
    CreatePost,
    IntentAction,
    add_comment_intent,
    cast_vote_intent,
    create_post_intent,
    parse_intent,
)


class TestWireForm:
    """Intents serialize to camelCase dicts."""

    def test_cast_vote_wire(self):
        intent = cast_vote_intent("P1", 1)
        assert intent.to_wire() == {"action": "cast_vote", "data": {"pollId": "P1", "optionIndex": 1}}

    def test_add_comment_wire(self):
        intent = add_comment_intent("post-9", "Nice work", ("https://img/1.png",))
        assert intent.to_wire() == {
            "action": "add_comment",
            "data": {"postId": "post-9", "commentText": "Nice work", "commentImages": ["https://img/1.png"]},
        }

    def test_create_post_defaults_to_thread(self):
        intent = create_post_intent("wip", "My avatar", "First pass")
        data = intent.to_wire()["data"]
        assert data["subtype"] == "thread"
        assert data["pollOptions"] == []


class TestParseIntent:
    """parse_intent picks the variant from the action tag."""

    def test_parses_each_variant(self):
        assert isinstance(parse_intent({"action": "cast_vote", "data": {"pollId": "P1", "optionIndex": 0}}), CastVote)
        assert isinstance(
            parse_intent({"action": "add_comment", "data": {"postId": "a", "commentText": "hi"}}), AddComment
        )
        assert isinstance(
            parse_intent({"action": "create_post",
                          "data": {"category": "general", "title": "t", "body": "b"}}),
            CreatePost,
        )

    def test_accepts_snake_case_fields(self):
        intent = parse_intent({"action": "cast_vote", "data": {"poll_id": "P1", "option_index": 2}})
        assert intent.data == CastVotePayload(poll_id="P1", option_index=2)

    def test_rejects_unknown_action(self):
        with pytest.raises(ValidationError):
            parse_intent({"action": "delete_post", "data": {}})

    def test_rejects_mismatched_payload(self):
        with pytest.raises(ValidationError):
            parse_intent({"action": "cast_vote", "data": {"postId": "a", "commentText": "hi"}})


class TestPayloads:

    def test_negative_option_index_rejected(self):
        with pytest.raises(ValidationError):
            cast_vote_intent("P1", -1)

    def test_payloads_are_frozen(self):
        intent = cast_vote_intent("P1", 1)
        with pytest.raises(ValidationError):
            intent.data.option_index = 2

    def test_equal_intents_compare_equal(self):
        assert cast_vote_intent("P1", 1) == cast_vote_intent("P1", 1)
        assert cast_vote_intent("P1", 1) != cast_vote_intent("P2", 1)

    def test_scope_keys(self):
        assert cast_vote_intent("P1", 0).data.scope_key == "P1"
        assert add_comment_intent("post-1", "x").data.scope_key == "post-1"
        assert create_post_intent("general", "t", "b").data.scope_key is None

    def test_action_enum_matches_tags(self):
        assert IntentAction("cast_vote") is IntentAction.CAST_VOTE
        assert cast_vote_intent("P1", 0).action == IntentAction.CAST_VOTE.value
