"""Poll widget controller: one per poll card on screen."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, List, Literal, Optional

import flet as ft

from virtuohub.client.controllers.base import GatedController
from virtuohub.client.ui.theme import CARD_BG, TEXT_MUTED, TEXT_TITLE, VOTE_SELECTED
from virtuohub.shared.core import events
from virtuohub.shared.domain.intents import CastVotePayload, Unregister, cast_vote_intent
from virtuohub.shared.infrastructure.api import ApiError

if TYPE_CHECKING:
    from virtuohub.client.state.store import Store

logger = logging.getLogger(__name__)


@dataclass
class Poll:
    id: str
    question: str
    options: List[Optional[str]] = field(default_factory=list)
    status: Literal["active", "closed"] = "active"


def poll_from_post(post: Dict[str, Any]) -> Poll:
    """Build a Poll from a feed post with ``subtype == "poll"``.

    ``subtypeData`` carries ``{question, choices[] | options[], closesAt}``.
    """
    data = post.get("subtypeData") or {}
    status: Literal["active", "closed"] = "active"
    closes_at = data.get("closesAt")
    if closes_at:
        try:
            closes = datetime.fromisoformat(str(closes_at).replace("Z", "+00:00"))
        except ValueError:
            logger.debug(f"Unparseable closesAt on poll {post.get('id')}: {closes_at!r}")
        else:
            if closes.tzinfo is None:
                closes = closes.replace(tzinfo=timezone.utc)
            if closes <= datetime.now(timezone.utc):
                status = "closed"
    return Poll(
        id=str(post["id"]),
        question=data.get("question") or post.get("title") or "",
        options=list(data.get("choices") or data.get("options") or []),
        status=status,
    )


class PollController(GatedController):
    """Voting for a single poll.

    Its ``cast_vote`` replay handler is registered unscoped, so it sees every
    replayed vote and ignores those for other polls.
    """

    def __init__(self, store: Store, poll: Poll, page: Optional[ft.Page] = None):
        super().__init__(store, page)
        self.poll = poll
        self.has_voted = False
        self.my_choice: Optional[int] = None
        self.submitting = False
        self.counts: Dict[int, int] = {}
        self._buttons: List[ft.Control] = []
        self._button_labels: List[ft.Text] = []
        self._status_text: Optional[ft.Text] = None

    @property
    def labels(self) -> List[str]:
        return [label for label in self.poll.options if label]

    @property
    def is_closed(self) -> bool:
        return self.poll.status == "closed"

    @property
    def can_vote(self) -> bool:
        return not self.is_closed and len(self.labels) >= 2

    @property
    def total_votes(self) -> int:
        return sum(self.counts.values())

    def _register(self) -> Unregister:
        return self.store.registry.register_replay_handlers(cast_vote=self._replay_vote)

    def vote(self, option_index: int) -> bool:
        """Vote now, or defer the vote until the guest signs in.

        Returns True when the vote request was started.
        """
        if not self._accepts(option_index):
            return False
        intent = cast_vote_intent(self.poll.id, option_index)
        if not self.store.gate.require_auth("vote in poll", intent):
            return False
        self._submit(option_index)
        return True

    def _accepts(self, option_index: int) -> bool:
        return self.can_vote and not self.has_voted and not self.submitting and 0 <= option_index < len(self.labels)

    def _replay_vote(self, payload: CastVotePayload) -> None:
        if payload.poll_id != self.poll.id:
            return
        if not self._accepts(payload.option_index):
            logger.debug(f"Replayed vote for poll {self.poll.id} no longer applies")
            return
        self._submit(payload.option_index)

    def _submit(self, option_index: int) -> None:
        self.submitting = True
        self._refresh()
        self._spawn(self._cast_vote(option_index), name=f"vote-{self.poll.id}")

    async def _cast_vote(self, option_index: int) -> None:
        try:
            await self.store.api.cast_vote(CastVotePayload(poll_id=self.poll.id, option_index=option_index))
        except ApiError as e:
            logger.warning(f"Vote on poll {self.poll.id} failed: {e}")
            self.store.app.notify("Vote failed", e.message or "Please try again.", "destructive")
        else:
            self.has_voted = True
            self.my_choice = option_index
            self.counts[option_index] = self.counts.get(option_index, 0) + 1
            self.store.bus.emit(events.TOPIC_VOTE_CAST, {"poll_id": self.poll.id, "option_index": option_index})
        finally:
            self.submitting = False
            self._refresh()

    def status_line(self) -> str:
        if self.is_closed:
            return "Closed"
        if self.has_voted:
            return "Results unlocked"
        return "Select an option to vote and reveal results."

    # --- View ---

    def build_view(self) -> ft.Control:
        if len(self.labels) < 2:
            body: ft.Control = ft.Text("No options available for this poll.", color=TEXT_MUTED, size=13)
        else:
            self._button_labels = [ft.Text(label) for label in self.labels]
            self._buttons = [
                ft.OutlinedButton(content=text, on_click=self._vote_handler(i), expand=True)
                for i, text in enumerate(self._button_labels)
            ]
            body = ft.Column(self._buttons, spacing=6)

        self._status_text = ft.Text(self.status_line(), color=TEXT_MUTED, size=12)
        self._view_built = True
        self._sync_view()
        return ft.Container(
            padding=16,
            bgcolor=CARD_BG,
            border_radius=12,
            content=ft.Column(
                [
                    ft.Text(self.poll.question, size=16, weight=ft.FontWeight.W_600, color=TEXT_TITLE),
                    body,
                    self._status_text,
                ],
                spacing=10,
            ),
        )

    def _vote_handler(self, option_index: int):
        async def _on_click(e) -> None:
            self.vote(option_index)

        return _on_click

    def _sync_view(self) -> None:
        total = self.total_votes
        for i, button in enumerate(self._buttons):
            label = self.labels[i]
            if self.has_voted and total:
                pct = round(100 * self.counts.get(i, 0) / total)
                label = f"{label}  ({pct}%)"
            self._button_labels[i].value = label
            button.disabled = not self.can_vote or self.has_voted or self.submitting
            if self.my_choice == i:
                button.style = ft.ButtonStyle(side=ft.BorderSide(2, VOTE_SELECTED))  # type: ignore[attr-defined]
        if self._status_text is not None:
            self._status_text.value = self.status_line()
