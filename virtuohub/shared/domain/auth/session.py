"""Signed-in user and session state as seen by the client."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field

from virtuohub.shared.core import events
from virtuohub.shared.core.event_bus import EventBus

logger = logging.getLogger(__name__)


class AuthEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"


class User(BaseModel):
    id: str
    email: Optional[str] = None
    user_metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def display_name(self) -> str:
        return self.user_metadata.get("full_name") or self.email or self.id


class AuthSession(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_at: Optional[datetime] = None
    user: User

    @property
    def is_expired(self) -> bool:
        return self.expires_at is not None and self.expires_at <= datetime.now(timezone.utc)


AuthListener = Callable[[AuthEvent, Optional[AuthSession]], None]


class AuthState:
    """Current session plus ``on_auth_state_change`` listeners.

    SIGNED_IN fires when a user appears where there was no live session (none
    yet, or an expired one) or when a different user signs in. A new token for
    a still-live session of the same user is TOKEN_REFRESHED, so repeated
    sign-in callbacks from the provider do not replay anything twice.
    """

    def __init__(self, bus: Optional[EventBus] = None) -> None:
        self.bus = bus
        self._session: Optional[AuthSession] = None
        self._listeners: List[AuthListener] = []

    @property
    def session(self) -> Optional[AuthSession]:
        return self._session

    @property
    def user(self) -> Optional[User]:
        return self._session.user if self._session else None

    @property
    def is_signed_in(self) -> bool:
        return self._session is not None and not self._session.is_expired

    @property
    def access_token(self) -> Optional[str]:
        return self._session.access_token if self.is_signed_in else None

    def on_auth_state_change(self, listener: AuthListener) -> Callable[[], None]:
        """Subscribe to auth changes. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_session(self, session: AuthSession) -> None:
        previous = self._session
        was_live = self.is_signed_in
        self._session = session
        if was_live and previous.user.id == session.user.id:
            self._fire(AuthEvent.TOKEN_REFRESHED)
        else:
            self._fire(AuthEvent.SIGNED_IN)

    def clear(self) -> None:
        if self._session is None:
            return
        self._session = None
        self._fire(AuthEvent.SIGNED_OUT)

    def _fire(self, event: AuthEvent) -> None:
        user = self.user
        logger.info(f"Auth state changed: {event.value}")
        for listener in list(self._listeners):
            try:
                listener(event, self._session)
            except Exception:
                logger.exception(f"Auth listener failed for {event.value}")
        if self.bus is not None:
            self.bus.emit(
                events.TOPIC_AUTH_STATE,
                events.create_auth_state_event(event.value, user.id if user else None, user.email if user else None),
            )
