"""Application Shell State Management.

Plain state holder for the shell: toasts, log feed, status text and the
signed-in identity shown in the header. UI widgets learn about changes by
subscribing to the EventBus topics this class publishes.
"""

from __future__ import annotations

import time
from collections import deque
from typing import Any, Deque, Dict, List, Optional

from virtuohub.shared.core import events
from virtuohub.shared.core.event_bus import EventBus, EventPayload


class AppState:
    """State for the Application Shell.

    Also acts as the toast ``Notifier`` for the intent store, so a failed
    replay surfaces in the same snackbar queue as every other message.

    Performance Optimizations:
    - Bounded deques for toasts and logs
    """

    def __init__(self, event_bus: EventBus, max_toasts: int = 20, max_logs: int = 200) -> None:
        """Initialize application state.

        Args:
            event_bus: The shared event bus for cross-cutting concerns
            max_toasts: Toast history kept in memory
            max_logs: Log entries kept in memory
        """
        self.bus = event_bus

        # Status & Readiness
        self.is_ready: bool = False
        self.status_text: str = "Starting VirtuoHub..."

        # Identity shown in the header
        self.signed_in_email: Optional[str] = None

        # Notifications (each is a dict: {title, description, variant, ts})
        self.toasts: Deque[Dict[str, Any]] = deque(maxlen=max_toasts)
        self.logs: Deque[Dict[str, Any]] = deque(maxlen=max_logs)

        self._started = False

    async def initialize(self) -> None:
        """Bind to EventBus events. Safe to call more than once."""
        if self._started:
            return

        await self.bus.subscribe(events.TOPIC_AUTH_STATE, self._handle_auth_state)
        await self.bus.subscribe(events.TOPIC_STATUS_TEXT, self._handle_status_text)
        await self.bus.subscribe(events.TOPIC_INTENT_REPLAYED, self._handle_intent_replayed)

        self._started = True
        self.is_ready = True

    # --- Public Actions ---

    def notify(self, title: str, description: str = "", variant: str = "default") -> None:
        """Queue a toast and announce it to the shell."""
        toast = events.create_toast_event(title, description, variant)  # type: ignore[arg-type]
        self.toasts.append(toast)
        self.bus.emit(events.TOPIC_TOAST, toast)

    @property
    def last_toast(self) -> Optional[Dict[str, Any]]:
        return self.toasts[-1] if self.toasts else None

    def recent_toasts(self, variant: Optional[str] = None) -> List[Dict[str, Any]]:
        return [t for t in self.toasts if variant is None or t["variant"] == variant]

    async def publish(self, topic: str, payload: EventPayload) -> None:
        await self.bus.publish(topic, payload)

    async def push_status(self, text: str) -> None:
        await self.publish(events.TOPIC_STATUS_TEXT, events.create_status_text_event(text))

    async def push_log(self, message: str, level: str = "info") -> None:
        """Add a log message and publish it."""
        entry = {"message": message, "level": level, "ts": time.time()}
        self.logs.append(entry)
        await self.publish(events.TOPIC_LOGS_EVENT, entry)

    # --- Event Handlers ---

    async def _handle_auth_state(self, payload: EventPayload) -> None:
        if payload.get("event") == "SIGNED_OUT":
            self.signed_in_email = None
        elif payload.get("user_id"):
            self.signed_in_email = payload.get("email") or payload.get("user_id")

    async def _handle_status_text(self, payload: EventPayload) -> None:
        text = payload.get("text")
        if text:
            self.status_text = str(text)

    async def _handle_intent_replayed(self, payload: EventPayload) -> None:
        level = "warning" if payload.get("failed") else "info"
        await self.push_log(
            f"Replayed {payload.get('action')} to {payload.get('handler_count', 0)} handler(s)",
            level,
        )
