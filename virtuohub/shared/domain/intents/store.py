"""Intent store: remembers what a guest was doing before we asked them to sign in.

State machine per intent::

    EMPTY   --set_intent-->             PENDING
    PENDING --set_intent (overwrite)--> PENDING
    PENDING --clear_intent-->           EMPTY
    PENDING --replay_intent-->          EMPTY   (whether handlers succeed or raise)

All calls happen on the UI event loop. Handlers run synchronously; any network
work they start is theirs to await and to report on.
"""

from __future__ import annotations

import logging
from typing import Literal, Optional, Protocol

from virtuohub.shared.core import events
from virtuohub.shared.core.event_bus import EventBus

from .models import Intent
from .registry import ReplayHandlerRegistry

logger = logging.getLogger(__name__)

AuthMode = Literal["signin", "signup"]
AUTH_MODES: tuple[str, ...] = ("signin", "signup")


class AuthModalController(Protocol):
    def open_auth_modal(self, mode: AuthMode) -> None: ...


class Notifier(Protocol):
    def notify(self, title: str, description: str = "", variant: str = "default") -> None: ...


class IntentStore:
    """Holds at most one pending intent and replays it through the registry."""

    def __init__(
        self,
        registry: ReplayHandlerRegistry,
        notifier: Optional[Notifier] = None,
        bus: Optional[EventBus] = None,
        failure_title: str = "Action failed",
        failure_description: str = "Please try again.",
    ) -> None:
        self.registry = registry
        self.notifier = notifier
        self.bus = bus
        self.failure_title = failure_title
        self.failure_description = failure_description
        self._intent: Optional[Intent] = None
        self._auth_modal_controller: Optional[AuthModalController] = None
        self._replaying = False

    @property
    def intent(self) -> Optional[Intent]:
        return self._intent

    @property
    def has_intent(self) -> bool:
        return self._intent is not None

    def set_intent(self, intent: Optional[Intent]) -> None:
        """Replace the pending intent unconditionally (last write wins)."""
        if intent is None:
            self.clear_intent()
            return
        if self._intent is not None:
            logger.debug(f"Overwriting pending '{self._intent.action}' intent with '{intent.action}'")
        self._intent = intent
        self._emit(events.TOPIC_INTENT_SET, events.create_intent_event(intent.action, intent.to_wire()["data"]))

    def clear_intent(self) -> None:
        was_pending = self._intent is not None
        self._intent = None
        if was_pending:
            self._emit(events.TOPIC_INTENT_CLEARED, events.create_intent_event(None))

    def replay_intent(self) -> None:
        """Dispatch the pending intent to every matching handler, then clear it.

        Handler exceptions never escape; any failure yields a single
        notification and the intent is cleared regardless.
        """
        if self._replaying:
            logger.debug("replay_intent called during an ongoing replay; ignored")
            return

        intent = self._intent
        if intent is None:
            return

        self._replaying = True
        failed = 0
        handlers = []
        try:
            handlers = self.registry.handlers_for(intent.action, intent.data)
            if not handlers:
                logger.debug(f"No replay handlers registered for '{intent.action}'")
            for handler in handlers:
                try:
                    handler(intent.data)
                except Exception:
                    failed += 1
                    logger.exception(f"Intent replay failed in handler for '{intent.action}'")
            if failed:
                self._notify_failure()
        finally:
            self._replaying = False
            self.clear_intent()

        logger.info(f"Replayed '{intent.action}' intent to {len(handlers)} handler(s), {failed} failed")
        self._emit(
            events.TOPIC_INTENT_REPLAYED,
            events.create_intent_replayed_event(intent.action, len(handlers), failed),
        )

    def register_auth_modal_controller(self, controller: Optional[AuthModalController]) -> None:
        """Bind the UI surface that opens the sign-in modal (last registration wins)."""
        self._auth_modal_controller = controller

    def request_auth(self, mode: AuthMode = "signin") -> None:
        """Ask the registered controller to open the auth modal; no-op when none is bound."""
        if mode not in AUTH_MODES:
            raise ValueError(f"Unknown auth mode {mode!r}, expected one of {AUTH_MODES}")
        controller = self._auth_modal_controller
        if controller is None:
            logger.debug(f"request_auth('{mode}') before an auth modal controller was registered")
            return
        controller.open_auth_modal(mode)
        self._emit(events.TOPIC_AUTH_MODAL_REQUESTED, events.create_auth_modal_event(mode))

    def _notify_failure(self) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier.notify(self.failure_title, self.failure_description, "destructive")
        except Exception:
            logger.exception("Failure notification could not be shown")

    def _emit(self, topic: str, payload: events.EventPayload) -> None:
        if self.bus is not None:
            self.bus.emit(topic, payload)
