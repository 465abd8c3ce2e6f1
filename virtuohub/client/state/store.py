"""Global State Store - Service Locator Pattern.

Owns everything scoped to the application root: event bus, shell state,
replay handler registry, intent store, auth state and the HTTP clients.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional

from virtuohub.client.state.app_state import AppState
from virtuohub.shared.core.configuration import SystemConfig
from virtuohub.shared.core.event_bus import EventBus
from virtuohub.shared.core.tasks import BackgroundTasks
from virtuohub.shared.domain.auth import AuthEvent, AuthSession, AuthState, LoginGate, User, replay_on_sign_in
from virtuohub.shared.domain.intents import IntentStore, ReplayHandlerRegistry
from virtuohub.shared.infrastructure.api import ApiError, VirtuoHubApiClient
from virtuohub.shared.infrastructure.auth import GoTrueClient

logger = logging.getLogger(__name__)


class Store:
    """Global state store for the client application.

    Usage:
        # During app initialization
        Store.initialize(event_bus, config)

        # In any UI component
        store = Store.get()
        store.gate.require_auth("vote", intent)

    Tests construct ``Store(...)`` directly so nothing leaks between them.
    """

    _instance: Optional['Store'] = None

    def __init__(
        self,
        event_bus: EventBus,
        config: Optional[SystemConfig] = None,
        api: Optional[VirtuoHubApiClient] = None,
        auth_client: Optional[GoTrueClient] = None,
    ) -> None:
        self.config = config or SystemConfig()
        self.bus = event_bus
        self.tasks = BackgroundTasks("Store")

        self.app = AppState(event_bus, max_toasts=self.config.ui.max_toasts)
        self.registry = ReplayHandlerRegistry()
        self.intents = IntentStore(
            self.registry,
            notifier=self.app,
            bus=event_bus,
            failure_title=self.config.intents.failure_title,
            failure_description=self.config.intents.failure_description,
        )
        self.auth = AuthState(event_bus)
        self.gate = LoginGate(self.auth, self.intents)

        self.api = api or VirtuoHubApiClient(
            self.config.api.base_url,
            token_provider=lambda: self.auth.access_token,
            timeout=self.config.api.timeout,
        )
        self.auth_client = auth_client or self._build_auth_client()

        self._unsubscribers: List[Callable[[], None]] = []
        if self.config.auth.upsert_profile_on_sign_in:
            self._unsubscribers.append(self.auth.on_auth_state_change(self._on_auth_change))
        if self.config.auth.replay_on_sign_in:
            self._unsubscribers.append(replay_on_sign_in(self.auth, self.intents))

    def _build_auth_client(self) -> Optional[GoTrueClient]:
        auth_cfg = self.config.auth
        if not (auth_cfg.supabase_url and auth_cfg.supabase_anon_key):
            logger.warning("Auth provider not configured; sign-in is unavailable")
            return None
        return GoTrueClient(auth_cfg.supabase_url, auth_cfg.supabase_anon_key, timeout=auth_cfg.timeout)

    def _on_auth_change(self, event: AuthEvent, session: Optional[AuthSession]) -> None:
        if event is not AuthEvent.SIGNED_IN or session is None:
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop; skipping profile upsert")
            return
        self.tasks.spawn(self._upsert_profile(session.user), name="profile-upsert")

    async def _upsert_profile(self, user: User) -> None:
        try:
            await self.api.upsert_profile(user)
            logger.debug(f"Profile upserted for {user.id}")
        except ApiError as e:
            logger.warning(f"Profile upsert attempt failed: {e}")

    async def aclose(self) -> None:
        """Detach listeners, wait for background work and close HTTP clients."""
        while self._unsubscribers:
            self._unsubscribers.pop()()
        await self.tasks.wait_until_idle(timeout=5.0)
        await self.api.aclose()
        if self.auth_client is not None:
            await self.auth_client.aclose()

    @classmethod
    def initialize(
        cls,
        event_bus: EventBus,
        config: Optional[SystemConfig] = None,
        api: Optional[VirtuoHubApiClient] = None,
        auth_client: Optional[GoTrueClient] = None,
    ) -> 'Store':
        """Initialize the global store instance.

        Raises:
            RuntimeError: If store is already initialized
        """
        if cls._instance is not None:
            raise RuntimeError("Store already initialized!")

        cls._instance = cls(event_bus, config, api, auth_client)
        return cls._instance

    @classmethod
    def get(cls) -> 'Store':
        """Get the global store instance.

        Raises:
            RuntimeError: If store has not been initialized
        """
        if cls._instance is None:
            raise RuntimeError("Store not initialized! Call Store.initialize() first.")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the store instance. Primarily used for testing."""
        cls._instance = None
