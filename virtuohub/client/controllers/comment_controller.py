"""Comment box under a thread."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, List, Optional

import flet as ft

from virtuohub.client.controllers.base import GatedController
from virtuohub.shared.core import events
from virtuohub.shared.domain.intents import AddCommentPayload, Unregister, add_comment_intent
from virtuohub.shared.infrastructure.api import ApiError

if TYPE_CHECKING:
    from virtuohub.client.state.store import Store

logger = logging.getLogger(__name__)


class CommentController(GatedController):
    """Comment box bound to one post.

    The replay handler is registered scoped to the post id, so the registry
    only hands it comments meant for this thread.
    """

    def __init__(self, store: Store, post_id: str, page: Optional[ft.Page] = None):
        super().__init__(store, page)
        self.post_id = post_id
        self.sending = False
        self.comment_count = 0
        self._input: Optional[ft.TextField] = None

    def _register(self) -> Unregister:
        return self.store.registry.register_replay_handlers(
            add_comment=self._replay_add_comment, scope=self.post_id,
        )

    def submit(self, text: str, images: Iterable[str] = ()) -> bool:
        text = text.strip()
        image_list = tuple(images)
        if not text and not image_list:
            return False
        if self.sending:
            return False

        intent = add_comment_intent(self.post_id, text, image_list)
        if not self.store.gate.require_auth("add comment", intent):
            return False
        self._send(intent.data)
        return True

    def _replay_add_comment(self, payload: AddCommentPayload) -> None:
        self._send(payload)

    def _send(self, payload: AddCommentPayload) -> None:
        self.sending = True
        self._refresh()
        self._spawn(self._add_comment(payload), name=f"comment-{self.post_id}")

    async def _add_comment(self, payload: AddCommentPayload) -> None:
        try:
            await self.store.api.add_comment(payload)
        except ApiError as e:
            logger.warning(f"Comment on {self.post_id} failed: {e}")
            self.store.app.notify("Failed to add comment", e.message or "Please try again.", "destructive")
        else:
            self.comment_count += 1
            if self._input is not None:
                self._input.value = ""
            self.store.bus.emit(events.TOPIC_COMMENT_ADDED, {"post_id": self.post_id})
        finally:
            self.sending = False
            self._refresh()

    def build_view(self) -> ft.Control:
        async def _on_send(e) -> None:
            self.submit(self._input.value or "")

        self._input = ft.TextField(
            hint_text="Add a comment...",
            multiline=True,
            expand=True,
            on_submit=_on_send,
        )
        self._view_built = True
        return ft.Row(
            [
                self._input,
                ft.IconButton(icon=ft.Icons.SEND, on_click=_on_send),
            ],
            vertical_alignment=ft.CrossAxisAlignment.END,
        )

    def _sync_view(self) -> None:
        if self._input is not None:
            self._input.disabled = self.sending
