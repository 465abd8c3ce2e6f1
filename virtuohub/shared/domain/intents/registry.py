"""Replay handler registry.

Maps each intent action to the ordered callbacks that know how to perform it
once the user has signed in. Several instances of the same widget (e.g. two
polls on one page) may register for the same action at the same time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .models import AddCommentPayload, CastVotePayload, CreatePostPayload, IntentAction, Payload

logger = logging.getLogger(__name__)

ReplayHandler = Callable[[Payload], None]
Unregister = Callable[[], None]


@dataclass(eq=False)
class _Registration:
    handler: ReplayHandler
    scope: Optional[str] = None


class ReplayHandlerRegistry:
    """Owned registry of replay handlers, one instance per application root."""

    def __init__(self) -> None:
        self._handlers: Dict[IntentAction, List[_Registration]] = {action: [] for action in IntentAction}

    def register_replay_handlers(
        self,
        create_post: Optional[Callable[[CreatePostPayload], None]] = None,
        add_comment: Optional[Callable[[AddCommentPayload], None]] = None,
        cast_vote: Optional[Callable[[CastVotePayload], None]] = None,
        *,
        scope: Optional[str] = None,
    ) -> Unregister:
        """Append the given handlers and return a function that removes them.

        Args:
            create_post: Handler for ``create_post`` intents
            add_comment: Handler for ``add_comment`` intents
            cast_vote: Handler for ``cast_vote`` intents
            scope: Entity id (post or poll id). Scoped handlers only receive
                intents whose payload targets that entity; unscoped handlers
                receive every intent of their action and must filter themselves.

        Returns:
            Unregister function. It removes exactly the registrations made by
            this call, and is a no-op when called again.
        """
        added: List[tuple[IntentAction, _Registration]] = []
        for action, handler in (
            (IntentAction.CREATE_POST, create_post),
            (IntentAction.ADD_COMMENT, add_comment),
            (IntentAction.CAST_VOTE, cast_vote),
        ):
            if handler is None:
                continue
            registration = _Registration(handler, scope)
            self._handlers[action].append(registration)
            added.append((action, registration))

        def unregister() -> None:
            while added:
                action, registration = added.pop()
                # Identity match; two registrations of the same function stay distinct
                entries = self._handlers[action]
                for index, entry in enumerate(entries):
                    if entry is registration:
                        del entries[index]
                        break

        return unregister

    def handlers_for(self, action: IntentAction | str, payload: Payload) -> List[ReplayHandler]:
        """Snapshot of handlers to dispatch for one intent, in registration order."""
        key = payload.scope_key
        return [
            entry.handler
            for entry in self._handlers[IntentAction(action)]
            if entry.scope is None or entry.scope == key
        ]

    def count(self, action: IntentAction | str) -> int:
        return len(self._handlers[IntentAction(action)])

    def clear(self) -> None:
        for entries in self._handlers.values():
            entries.clear()
