from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List

import flet as ft

from virtuohub.client.controllers import (
    CommentController,
    ComposerController,
    GatedController,
    PollController,
    poll_from_post,
)
from virtuohub.client.state import Store
from virtuohub.client.ui.components.auth_modal import AuthModal
from virtuohub.client.ui.theme import (
    VIOLET_PRIMARY,
    # Text
    TEXT_BRIGHT, TEXT_MUTED, TEXT_TITLE,
    # Backgrounds
    BG_HEADER, BG_GRADIENT_START, BG_GRADIENT_END, CARD_BG,
    BORDER_DIVIDER,
    get_toast_color,
)
from virtuohub.shared.core import events
from virtuohub.shared.core.event_bus import EventPayload

logger = logging.getLogger(__name__)


def apply_shell_theme(page: ft.Page, theme_mode: str = "dark") -> None:
    """Apply the violet-on-dark baseline theme."""
    page.theme = ft.Theme(
        color_scheme_seed=VIOLET_PRIMARY,
        visual_density=ft.VisualDensity.COMFORTABLE,
        use_material3=True,
    )
    page.theme_mode = ft.ThemeMode.LIGHT if theme_mode == "light" else ft.ThemeMode.DARK
    page.padding = 0


def _safe_update(page: ft.Page) -> None:
    try:
        page.update()
    except RuntimeError:
        # Session destroyed, ignore update
        pass


def _thread_card(post: Dict[str, Any], comments: CommentController) -> ft.Control:
    meta = f"{post.get('category', 'general')} · {post.get('commentCount', 0)} comments"
    return ft.Container(
        padding=16,
        bgcolor=CARD_BG,
        border_radius=12,
        content=ft.Column(
            [
                ft.Text(post.get("title", ""), size=16, weight=ft.FontWeight.W_600, color=TEXT_TITLE),
                ft.Text(post.get("body", ""), color=TEXT_BRIGHT, size=13),
                ft.Text(meta, color=TEXT_MUTED, size=11),
                comments.build_view(),
            ],
            spacing=8,
        ),
    )


def build_shell(page: ft.Page, store: Store) -> ft.View:
    apply_shell_theme(page, store.config.ui.theme_mode)

    # The modal is the intent store's auth modal controller for the whole app
    auth_modal = AuthModal(store, page)
    store.intents.register_auth_modal_controller(auth_modal)

    composer = ComposerController(store, page)
    composer.start()

    # Controllers bound to the feed cards currently on screen
    feed_controllers: List[GatedController] = []
    feed_column = ft.Column(
        controls=[ft.Text("Loading posts...", color=TEXT_MUTED, size=14, italic=True)],
        spacing=12,
    )

    # --- Header ---
    user_text = ft.Text("", color=TEXT_MUTED, size=12)
    status_text = ft.Text(store.app.status_text, color=TEXT_MUTED, size=12)

    async def _sign_in(e) -> None:
        store.intents.request_auth("signin")

    async def _sign_up(e) -> None:
        store.intents.request_auth("signup")

    async def _sign_out(e) -> None:
        await auth_modal.sign_out()

    sign_in_button = ft.TextButton(content=ft.Text("Sign In"), on_click=_sign_in)
    sign_up_button = ft.ElevatedButton(content=ft.Text("Sign Up"), on_click=_sign_up)
    sign_out_button = ft.TextButton(content=ft.Text("Sign Out"), on_click=_sign_out)

    def _sync_header() -> None:
        user = store.auth.user
        signed_in = user is not None
        user_text.value = user.display_name if signed_in else "Browsing as guest"
        sign_in_button.visible = not signed_in
        sign_up_button.visible = not signed_in
        sign_out_button.visible = signed_in

    header = ft.Container(
        bgcolor=BG_HEADER,
        padding=ft.padding.symmetric(horizontal=20, vertical=10),
        content=ft.Row(
            [
                ft.Text("VirtuoHub", size=20, weight=ft.FontWeight.W_700, color=TEXT_TITLE),
                ft.Container(expand=True),  # Spacer
                status_text,
                user_text,
                sign_in_button,
                sign_up_button,
                sign_out_button,
            ],
            spacing=12,
            vertical_alignment=ft.CrossAxisAlignment.CENTER,
        ),
    )

    # --- Feed ---

    def _render_feed(posts: List[Dict[str, Any]]) -> None:
        while feed_controllers:
            feed_controllers.pop().dispose()

        cards: List[ft.Control] = []
        for post in posts:
            if "id" not in post:
                continue
            if post.get("subtype") == "poll":
                controller: GatedController = PollController(store, poll_from_post(post), page)
                cards.append(controller.build_view())
            else:
                controller = CommentController(store, str(post["id"]), page)
                cards.append(_thread_card(post, controller))
            controller.start()
            feed_controllers.append(controller)

        feed_column.controls = cards or [ft.Text("No posts yet.", color=TEXT_MUTED, size=14, italic=True)]
        logger.debug(f"Rendered {len(cards)} feed card(s)")

    # --- Event Handlers ---

    async def _on_toast(payload: EventPayload) -> None:
        description = payload.get("description") or ""
        snack = ft.SnackBar(
            content=ft.Column(
                [
                    ft.Text(payload.get("title", ""), weight=ft.FontWeight.W_600, color=TEXT_BRIGHT),
                    ft.Text(description, size=12, color=TEXT_BRIGHT, visible=bool(description)),
                ],
                tight=True,
                spacing=2,
            ),
            bgcolor=get_toast_color(payload.get("variant", "default")),
            duration=store.config.ui.toast_duration_ms,
        )
        page.overlay.append(snack)
        snack.open = True
        _safe_update(page)

    async def _on_auth_state(payload: EventPayload) -> None:
        _sync_header()
        _safe_update(page)

    async def _on_status_text(payload: EventPayload) -> None:
        status_text.value = payload.get("text", "")
        _safe_update(page)

    async def _on_feed_loaded(payload: EventPayload) -> None:
        _render_feed(payload.get("posts") or [])
        _safe_update(page)

    async def _on_post_created(payload: EventPayload) -> None:
        await store.app.push_status(f"Published a {payload.get('subtype', 'post')}")

    bus = store.bus
    asyncio.create_task(bus.subscribe(events.TOPIC_TOAST, _on_toast))
    asyncio.create_task(bus.subscribe(events.TOPIC_AUTH_STATE, _on_auth_state))
    asyncio.create_task(bus.subscribe(events.TOPIC_STATUS_TEXT, _on_status_text))
    asyncio.create_task(bus.subscribe(events.TOPIC_FEED_LOADED, _on_feed_loaded))
    asyncio.create_task(bus.subscribe(events.TOPIC_POST_CREATED, _on_post_created))

    # --- Main Layout ---
    chrome = ft.Container(
        expand=True,
        gradient=ft.LinearGradient(
            begin=ft.Alignment.TOP_LEFT,
            end=ft.Alignment.BOTTOM_RIGHT,
            colors=[BG_GRADIENT_START, BG_GRADIENT_END],
        ),
        content=ft.Column(
            [
                header,
                ft.Divider(height=1, color=BORDER_DIVIDER),
                ft.Container(
                    expand=True,
                    padding=ft.padding.only(left=20, right=20, top=16, bottom=20),
                    content=ft.Column(
                        [composer.build_view(), ft.Divider(color=BORDER_DIVIDER, height=1), feed_column],
                        spacing=16,
                        scroll=ft.ScrollMode.AUTO,
                    ),
                ),
            ],
            spacing=0,
            expand=True,
        ),
    )

    # Initial Sync
    _sync_header()

    return ft.View(
        route="/",
        controls=[chrome],
        bgcolor=ft.Colors.BLACK,
        padding=0,
    )
