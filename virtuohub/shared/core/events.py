"""Canonical event definitions for the VirtuoHub client."""

from __future__ import annotations

import time
from typing import Any, Dict, List, Literal, Optional

from .event_bus import EventPayload

# Event Topics
TOPIC_LOGS_EVENT = "logs.event"
TOPIC_STATUS_TEXT = "status.text"
TOPIC_TOAST = "toast.show"

# Intent lifecycle
TOPIC_INTENT_SET = "intent.set"
TOPIC_INTENT_CLEARED = "intent.cleared"
TOPIC_INTENT_REPLAYED = "intent.replayed"

# Auth
TOPIC_AUTH_MODAL_REQUESTED = "auth.modal.requested"
TOPIC_AUTH_STATE = "auth.state"

# Feature actions
TOPIC_POST_CREATED = "post.created"
TOPIC_COMMENT_ADDED = "comment.added"
TOPIC_VOTE_CAST = "vote.cast"

# Feed
TOPIC_FEED_LOADED = "feed.loaded"

ToastVariant = Literal["default", "success", "destructive"]


def create_logs_event(
    message: str,
    level: Literal["info", "warning", "error", "success"] = "info",
    topic: str | None = None,
) -> EventPayload:
    """Create a Log event."""
    return {
        "message": message,
        "level": level,
        "topic": topic,
        "ts": time.time(),
    }


def create_status_text_event(text: str) -> EventPayload:
    """Create a status text update event."""
    return {
        "text": text,
    }


def create_toast_event(
    title: str,
    description: str = "",
    variant: ToastVariant = "default",
) -> EventPayload:
    """Create a toast notification event."""
    return {
        "title": title,
        "description": description,
        "variant": variant,
        "ts": time.time(),
    }


def create_intent_event(action: Optional[str], data: Optional[Dict[str, Any]] = None) -> EventPayload:
    """Create an intent lifecycle event.

    Args:
        action: Intent action tag, or None when the store was emptied
        data: Wire form of the intent payload
    """
    event: EventPayload = {"action": action}
    if data is not None:
        event["data"] = data
    return event


def create_intent_replayed_event(action: str, handler_count: int, failed: int) -> EventPayload:
    """Create an intent replayed event."""
    return {
        "action": action,
        "handler_count": handler_count,
        "failed": failed,
    }


def create_auth_modal_event(mode: str) -> EventPayload:
    """Create an auth modal request event."""
    return {
        "mode": mode,
    }


def create_auth_state_event(event: str, user_id: str | None, email: str | None = None) -> EventPayload:
    """Create an auth state change event (SIGNED_IN, SIGNED_OUT, TOKEN_REFRESHED)."""
    return {
        "event": event,
        "user_id": user_id,
        "email": email,
    }


def create_feed_loaded_event(posts: List[Dict[str, Any]], category: Optional[str] = None) -> EventPayload:
    """Create a feed loaded event carrying the raw post dicts."""
    return {
        "posts": posts,
        "category": category,
    }
