"""Auth state observed by gated actions."""

from .session import AuthEvent, AuthListener, AuthSession, AuthState, User
from .gate import LoginGate, replay_on_sign_in

__all__ = [
    "AuthEvent",
    "AuthListener",
    "AuthSession",
    "AuthState",
    "User",
    "LoginGate",
    "replay_on_sign_in",
]
