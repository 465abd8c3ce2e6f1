"""State management for the client shell.

Architecture:
- AppState: shell state (toasts, logs, status, signed-in identity)
- Store: service locator owning the intent store, registry, auth state and clients
"""

from .app_state import AppState
from .store import Store

__all__ = ["AppState", "Store"]
