"""Deferred-intent authentication gate.

- models: Intent sum type and payloads
- registry: ReplayHandlerRegistry (per-action handler lists)
- store: IntentStore (pending intent, replay, auth modal binding)
"""

from .models import (
    IntentAction,
    Intent,
    Payload,
    CreatePost,
    AddComment,
    CastVote,
    CreatePostPayload,
    AddCommentPayload,
    CastVotePayload,
    parse_intent,
    create_post_intent,
    add_comment_intent,
    cast_vote_intent,
)
from .registry import ReplayHandlerRegistry, ReplayHandler, Unregister
from .store import IntentStore, AuthModalController, AuthMode, Notifier

__all__ = [
    "IntentAction",
    "Intent",
    "Payload",
    "CreatePost",
    "AddComment",
    "CastVote",
    "CreatePostPayload",
    "AddCommentPayload",
    "CastVotePayload",
    "parse_intent",
    "create_post_intent",
    "add_comment_intent",
    "cast_vote_intent",
    "ReplayHandlerRegistry",
    "ReplayHandler",
    "Unregister",
    "IntentStore",
    "AuthModalController",
    "AuthMode",
    "Notifier",
]
