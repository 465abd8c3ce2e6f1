"""Sign-in / sign-up dialog.

Registered into the intent store by the shell as the auth modal controller.
A successful password sign-in stores the session, which fires SIGNED_IN and
replays whatever the guest was trying to do.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal, Optional

import flet as ft

from virtuohub.shared.domain.intents.store import AUTH_MODES, AuthMode
from virtuohub.shared.infrastructure.auth import AuthError

if TYPE_CHECKING:
    from virtuohub.client.state.store import Store

logger = logging.getLogger(__name__)

ModalMode = Literal["signin", "signup", "magic-link"]

_TITLES = {
    "signin": ("Sign In", "Welcome back! Please sign in to continue."),
    "signup": ("Create Account", "Create a new account to get started."),
    "magic-link": ("Magic Link Sign In", "We'll send you a magic link to sign in."),
}


class AuthModal:
    """Auth modal controller backed by a Flet AlertDialog."""

    def __init__(self, store: Store, page: Optional[ft.Page] = None):
        self.store = store
        self.page = page
        self.mode: ModalMode = "signin"
        self.is_open = False
        self.loading = False
        self._dialog: Optional[ft.AlertDialog] = None
        self._title: Optional[ft.Text] = None
        self._subtitle: Optional[ft.Text] = None
        self._email: Optional[ft.TextField] = None
        self._password: Optional[ft.TextField] = None
        self._submit_button: Optional[ft.ElevatedButton] = None
        self._switch_button: Optional[ft.TextButton] = None

    # --- Controller contract ---

    def open_auth_modal(self, mode: AuthMode) -> None:
        if mode not in AUTH_MODES:
            raise ValueError(f"Unknown auth mode {mode!r}")
        self.mode = mode
        self.is_open = True
        logger.debug(f"Opening auth modal in {mode} mode")
        self._show()

    def close(self) -> None:
        self.is_open = False
        self._reset_form()
        if self._dialog is not None and self.page is not None:
            self._dialog.open = False
            self.page.update()

    def set_mode(self, mode: ModalMode) -> None:
        self.mode = mode
        self._sync_view()

    # --- Actions ---

    async def authenticate(self, email: str, password: str) -> bool:
        """Run the current mode against the auth provider.

        Returns True when the modal closed because the step succeeded.
        """
        client = self.store.auth_client
        if client is None:
            self.store.app.notify("Sign-in unavailable", "Authentication is not configured.", "destructive")
            return False
        if self.mode == "magic-link":
            return await self.send_magic_link(email)

        self.loading = True
        self._sync_view()
        try:
            if self.mode == "signup":
                session = await client.sign_up(email, password)
                if session is None:
                    self.store.app.notify(
                        "Check your email",
                        "We've sent you a confirmation link to complete your signup.",
                    )
                else:
                    self.store.auth.set_session(session)
                    self.store.app.notify("Welcome!", "Your account is ready.", "success")
            else:
                session = await client.sign_in_with_password(email, password)
                # Closing first keeps the dialog out of the way of replayed actions
                self.close()
                self.store.auth.set_session(session)
                self.store.app.notify("Welcome back!", "You've been signed in successfully.", "success")
                return True
        except AuthError as e:
            logger.info(f"Authentication failed: {e.message}")
            self.store.app.notify("Authentication failed", e.message, "destructive")
            return False
        finally:
            self.loading = False
            self._sync_view()

        self.close()
        return True

    async def send_magic_link(self, email: str) -> bool:
        client = self.store.auth_client
        if client is None:
            return False
        self.loading = True
        try:
            await client.sign_in_with_otp(email, redirect_to=self.store.config.auth.redirect_url)
        except AuthError as e:
            self.store.app.notify("Failed to send magic link", e.message, "destructive")
            return False
        finally:
            self.loading = False
        self.store.app.notify("Check your email", "We've sent you a magic link to sign in.")
        self.close()
        return True

    async def sign_out(self) -> None:
        client = self.store.auth_client
        token = self.store.auth.access_token
        if client is not None and token:
            try:
                await client.sign_out(token)
            except AuthError as e:
                logger.warning(f"Sign-out request failed: {e}")
        self.store.auth.clear()

    # --- View ---

    def _show(self) -> None:
        if self.page is None:
            return
        if self._dialog is None:
            self._dialog = self._build_dialog()
        if self._dialog not in self.page.overlay:
            self.page.overlay.append(self._dialog)
        self._sync_view()
        self._dialog.open = True
        self.page.update()

    def _build_dialog(self) -> ft.AlertDialog:
        self._title = ft.Text("", weight=ft.FontWeight.W_700)
        self._subtitle = ft.Text("", size=13)
        self._email = ft.TextField(label="Email", keyboard_type=ft.KeyboardType.EMAIL, autofocus=True)
        self._password = ft.TextField(label="Password", password=True, can_reveal_password=True)

        async def _submit(e) -> None:
            await self.authenticate(self._email.value or "", self._password.value or "")

        def _toggle(e) -> None:
            self.set_mode("signup" if self.mode == "signin" else "signin")
            if self.page is not None:
                self.page.update()

        def _magic(e) -> None:
            self.set_mode("magic-link")
            if self.page is not None:
                self.page.update()

        self._submit_button = ft.ElevatedButton(content=ft.Text("Continue"), on_click=_submit)
        self._switch_button = ft.TextButton(content=ft.Text(""), on_click=_toggle)
        self._password.on_submit = _submit

        return ft.AlertDialog(
            modal=True,
            title=self._title,
            content=ft.Column(
                [self._subtitle, self._email, self._password, ft.TextButton(content=ft.Text("Email me a magic link"), on_click=_magic)],
                tight=True,
                spacing=10,
            ),
            actions=[
                self._switch_button,
                ft.TextButton(content=ft.Text("Cancel"), on_click=lambda e: self.close()),
                self._submit_button,
            ],
            actions_alignment=ft.MainAxisAlignment.END,
        )

    def _sync_view(self) -> None:
        if self._dialog is None:
            return
        title, subtitle = _TITLES[self.mode]
        self._title.value = title
        self._subtitle.value = subtitle
        self._password.visible = self.mode != "magic-link"
        self._submit_button.disabled = self.loading
        self._switch_button.content = ft.Text(
            "Need an account? Sign up" if self.mode != "signup" else "Have an account? Sign in"
        )

    def _reset_form(self) -> None:
        self.loading = False
        for field in (self._email, self._password):
            if field is not None:
                field.value = ""
