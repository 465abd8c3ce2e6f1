"""Feature controllers whose actions are gated behind sign-in."""

from .base import GatedController
from .comment_controller import CommentController
from .composer_controller import ComposerController, POST_CATEGORIES, normalize_category, validate_post_draft
from .poll_controller import Poll, PollController, poll_from_post

__all__ = [
    "GatedController",
    "CommentController",
    "ComposerController",
    "POST_CATEGORIES",
    "normalize_category",
    "validate_post_draft",
    "Poll",
    "PollController",
    "poll_from_post",
]
