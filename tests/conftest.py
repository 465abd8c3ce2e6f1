"""
VirtuoHub Test Fixtures
=======================

Shared fixtures for all test modules.
"""

from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock

import pytest

from virtuohub.client.state.store import Store
from virtuohub.shared.core.configuration import SystemConfig
from virtuohub.shared.core.event_bus import EventBus
from virtuohub.shared.domain.auth import AuthSession, User
from virtuohub.shared.domain.intents import IntentStore, ReplayHandlerRegistry
from virtuohub.shared.infrastructure.api import VirtuoHubApiClient
from virtuohub.shared.infrastructure.auth import GoTrueClient


# ============================================
# RECORDERS
# ============================================

class RecordingNotifier:
    """Collects toasts instead of showing them."""

    def __init__(self):
        self.toasts: List[Dict[str, Any]] = []

    def notify(self, title: str, description: str = "", variant: str = "default") -> None:
        self.toasts.append({"title": title, "description": description, "variant": variant})


class RecordingModal:
    """Auth modal controller that only remembers the requested modes."""

    def __init__(self):
        self.modes: List[str] = []

    def open_auth_modal(self, mode: str) -> None:
        self.modes.append(mode)


def make_session(user_id: str = "user-1", email: Optional[str] = "guest@example.com",
                 token: str = "access-token", full_name: Optional[str] = None) -> AuthSession:
    metadata = {"full_name": full_name} if full_name else {}
    return AuthSession(
        access_token=token,
        refresh_token="refresh-token",
        user=User(id=user_id, email=email, user_metadata=metadata),
    )


# ============================================
# INTENT STORE
# ============================================

@pytest.fixture
def registry():
    """Empty replay handler registry."""
    return ReplayHandlerRegistry()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def modal():
    return RecordingModal()


@pytest.fixture
def intent_store(registry, notifier):
    """Intent store without an event bus."""
    return IntentStore(registry, notifier=notifier)


# ============================================
# STORE
# ============================================

@pytest.fixture
def mock_api():
    """Backend client whose action endpoints all succeed."""
    api = AsyncMock(spec=VirtuoHubApiClient)
    api.create_post = AsyncMock(return_value={"id": "post-new"})
    api.add_comment = AsyncMock(return_value={"id": "comment-new"})
    api.cast_vote = AsyncMock(return_value={"ok": True})
    api.upsert_profile = AsyncMock(return_value=None)
    api.list_posts = AsyncMock(return_value=[])
    api.aclose = AsyncMock()
    return api


@pytest.fixture
def mock_auth_client():
    """Auth provider client; sign-in succeeds with the default session."""
    client = AsyncMock(spec=GoTrueClient)
    client.sign_in_with_password = AsyncMock(return_value=make_session())
    client.sign_up = AsyncMock(return_value=None)
    client.sign_in_with_otp = AsyncMock(return_value=None)
    client.sign_out = AsyncMock(return_value=None)
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def store(mock_api, mock_auth_client, modal):
    """Application store wired to mocked clients and a recording modal."""
    s = Store(EventBus(), SystemConfig(), api=mock_api, auth_client=mock_auth_client)
    s.intents.register_auth_modal_controller(modal)
    return s
