"""Login gate for guest actions and the sign-in observer that replays them."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from virtuohub.shared.domain.intents import AuthMode, Intent, IntentStore

from .session import AuthEvent, AuthSession, AuthState

logger = logging.getLogger(__name__)


class LoginGate:
    """Decides whether a gated action may run now or must wait for sign-in."""

    def __init__(self, auth: AuthState, intents: IntentStore) -> None:
        self.auth = auth
        self.intents = intents

    def require_auth(self, action_label: str, intent: Intent, mode: AuthMode = "signin") -> bool:
        """Return True when the user may proceed.

        Otherwise the intent is captured, the auth modal is requested and
        False is returned; the action runs later through replay.
        """
        if self.auth.is_signed_in:
            return True
        logger.info(f"Authentication required for: {action_label}")
        self.intents.set_intent(intent)
        self.intents.request_auth(mode)
        return False


def replay_on_sign_in(auth: AuthState, intents: IntentStore) -> Callable[[], None]:
    """Replay the pending intent whenever a user signs in.

    Returns the unsubscribe function of the underlying listener.
    """

    def _on_auth_change(event: AuthEvent, session: Optional[AuthSession]) -> None:
        if event is AuthEvent.SIGNED_IN:
            intents.replay_intent()
        elif event is AuthEvent.SIGNED_OUT and intents.has_intent:
            logger.debug("Signed out with a pending intent; keeping it for the next sign-in")

    return auth.on_auth_state_change(_on_auth_change)
