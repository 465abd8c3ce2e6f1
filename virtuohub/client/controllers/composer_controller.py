"""Post composer: threads and polls, gated behind sign-in."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

import flet as ft

from virtuohub.client.controllers.base import GatedController
from virtuohub.client.ui.theme import ERROR_TEXT, TEXT_TITLE
from virtuohub.shared.core import events
from virtuohub.shared.domain.intents import CreatePost, CreatePostPayload, Unregister
from virtuohub.shared.infrastructure.api import ApiError

if TYPE_CHECKING:
    from virtuohub.client.state.store import Store

logger = logging.getLogger(__name__)

TITLE_MAX = 200
BODY_MAX = 5000

POST_CATEGORIES: List[Dict[str, str]] = [
    {"label": "Work in Progress (WIP)", "slug": "wip"},
    {"label": "Get Feedback", "slug": "feedback"},
    {"label": "Tutorials & Guides", "slug": "tutorials"},
    {"label": "Hire & Collaborate", "slug": "hire-collab"},
    {"label": "Sell Your Creations", "slug": "sell"},
    {"label": "Collabs & Teams", "slug": "teams"},
    {"label": "Events & Workshops", "slug": "events"},
    {"label": "Platform Q&A", "slug": "platform-qa"},
    {"label": "General", "slug": "general"},
]

# Older category labels still found on existing posts
LEGACY_CATEGORY_MAP: Dict[str, str] = {
    "WIP (Work in Progress)": "wip",
    "Help & Feedback": "feedback",
    "Tutorials & Guides": "tutorials",
    "Jobs & Gigs": "hire-collab",
    "Assets for Sale": "sell",
    "Collabs & Teams": "teams",
    "Events & Workshops": "events",
    "Platform Q&A": "platform-qa",
    "General": "general",
}

_SLUGS = {c["slug"] for c in POST_CATEGORIES}


def normalize_category(value: str) -> Optional[str]:
    """Map a slug, current label or legacy label to a category slug."""
    value = value.strip()
    if value in _SLUGS:
        return value
    for category in POST_CATEGORIES:
        if category["label"] == value:
            return category["slug"]
    return LEGACY_CATEGORY_MAP.get(value)


def validate_post_draft(draft: CreatePostPayload) -> Dict[str, str]:
    """Return field -> error message; empty when the draft can be published."""
    errors: Dict[str, str] = {}
    title = draft.title.strip()
    if not title:
        errors["title"] = "Title is required"
    elif len(title) > TITLE_MAX:
        errors["title"] = "Title too long"

    body = draft.body.strip()
    if draft.subtype == "thread" and not body:
        errors["body"] = "Content is required"
    elif len(body) > BODY_MAX:
        errors["body"] = "Content too long"

    if not draft.category.strip():
        errors["category"] = "Category is required"
    elif normalize_category(draft.category) is None:
        errors["category"] = "Unknown category"

    if draft.subtype == "poll" and len(draft.poll_options) < 2:
        errors["poll_options"] = "A poll needs at least two options"
    return errors


class ComposerController(GatedController):
    """Create-post form. One composer is mounted at a time."""

    def __init__(self, store: Store, page: Optional[ft.Page] = None, default_category: str = "general"):
        super().__init__(store, page)
        self.default_category = default_category
        self.errors: Dict[str, str] = {}
        self.publishing = False
        self.published: List[dict] = []
        self._title_field: Optional[ft.TextField] = None
        self._body_field: Optional[ft.TextField] = None
        self._category_dropdown: Optional[ft.Dropdown] = None
        self._poll_switch: Optional[ft.Switch] = None
        self._options_field: Optional[ft.TextField] = None
        self._error_text: Optional[ft.Text] = None
        self._publish_button: Optional[ft.ElevatedButton] = None

    def _register(self) -> Unregister:
        return self.store.registry.register_replay_handlers(create_post=self._replay_create_post)

    def submit(
        self,
        title: str,
        body: str,
        category: Optional[str] = None,
        subtype: str = "thread",
        poll_options: Iterable[str] = (),
    ) -> bool:
        """Publish now, or defer until the guest signs in.

        Returns True when publishing was started.
        """
        if self.publishing:
            return False
        raw_category = category if category is not None else self.default_category
        draft = CreatePostPayload(
            category=normalize_category(raw_category) or raw_category,
            subtype=subtype,
            title=title.strip(),
            body=body.strip(),
            poll_options=tuple(o.strip() for o in poll_options if o and o.strip()),
        )
        self.errors = validate_post_draft(draft)
        if self.errors:
            self._refresh()
            return False

        if not self.store.gate.require_auth("create post", CreatePost(data=draft)):
            return False
        self._publish(draft)
        return True

    def _replay_create_post(self, payload: CreatePostPayload) -> None:
        if self.publishing:
            logger.warning("Replayed post skipped while another is publishing")
            return
        self._publish(payload)

    def _publish(self, payload: CreatePostPayload) -> None:
        self.publishing = True
        self._refresh()
        self._spawn(self._create_post(payload), name="create-post")

    async def _create_post(self, payload: CreatePostPayload) -> None:
        try:
            created = await self.store.api.create_post(payload)
        except ApiError as e:
            logger.warning(f"Publishing {payload.subtype} failed: {e}")
            self.store.app.notify("Failed to publish post", e.message or "Please try again.", "destructive")
        else:
            self.published.append(created or {})
            self.store.app.notify(f"Your {payload.subtype} has been published!", variant="success")
            self.store.bus.emit(events.TOPIC_POST_CREATED, {"subtype": payload.subtype, "category": payload.category})
            self._clear_form()
        finally:
            self.publishing = False
            self._refresh()

    # --- View ---

    def build_view(self) -> ft.Control:
        self._title_field = ft.TextField(label="Title *", max_length=TITLE_MAX)
        self._body_field = ft.TextField(label="Content", multiline=True, min_lines=3, max_lines=8)
        self._category_dropdown = ft.Dropdown(
            label="Category *",
            value=self.default_category,
            options=[ft.dropdown.Option(key=c["slug"], text=c["label"]) for c in POST_CATEGORIES],
        )
        self._poll_switch = ft.Switch(label="Poll")
        self._options_field = ft.TextField(label="Poll options (one per line)", multiline=True, min_lines=2)
        self._error_text = ft.Text("", color=ERROR_TEXT, size=12)

        async def _on_publish(e) -> None:
            is_poll = bool(self._poll_switch.value)
            self.submit(
                title=self._title_field.value or "",
                body=self._body_field.value or "",
                category=self._category_dropdown.value,
                subtype="poll" if is_poll else "thread",
                poll_options=(self._options_field.value or "").splitlines() if is_poll else (),
            )

        self._publish_button = ft.ElevatedButton(content=ft.Text("Publish"), icon=ft.Icons.SEND, on_click=_on_publish)
        self._view_built = True
        return ft.Container(
            padding=16,
            content=ft.Column(
                [
                    ft.Text("Create Post", size=18, weight=ft.FontWeight.W_700, color=TEXT_TITLE),
                    self._title_field,
                    self._body_field,
                    ft.Row([self._category_dropdown, self._poll_switch], spacing=12),
                    self._options_field,
                    self._error_text,
                    self._publish_button,
                ],
                spacing=10,
            ),
        )

    def _clear_form(self) -> None:
        self.errors = {}
        for field in (self._title_field, self._body_field, self._options_field):
            if field is not None:
                field.value = ""

    def _sync_view(self) -> None:
        if self._error_text is not None:
            self._error_text.value = "; ".join(self.errors.values())
        if self._publish_button is not None:
            self._publish_button.disabled = self.publishing
