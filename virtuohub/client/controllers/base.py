"""Shared plumbing for controllers whose actions need a signed-in user."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Coroutine, Optional

import flet as ft

from virtuohub.shared.domain.intents import Unregister

if TYPE_CHECKING:
    from virtuohub.client.state.store import Store

logger = logging.getLogger(__name__)


class GatedController:
    """Base for composer, comment box and poll widget.

    Subclasses register their replay handlers in ``_register`` and sync their
    Flet controls in ``_sync_view``. ``start``/``dispose`` mirror mount and
    unmount of the widget.
    """

    def __init__(self, store: Store, page: Optional[ft.Page] = None):
        self.store = store
        self.page = page
        self._unregister: Optional[Unregister] = None
        self._view_built = False

    @property
    def is_started(self) -> bool:
        return self._unregister is not None

    def start(self) -> None:
        if self._unregister is None:
            self._unregister = self._register()

    def dispose(self) -> None:
        if self._unregister is not None:
            self._unregister()
            self._unregister = None

    def _register(self) -> Unregister:
        raise NotImplementedError

    def _spawn(self, coro: Coroutine[Any, Any, Any], name: str) -> None:
        self.store.tasks.spawn(coro, name=name)

    def _sync_view(self) -> None:
        """Push controller state into the built controls."""

    def _refresh(self) -> None:
        if not self._view_built:
            return
        self._sync_view()
        if self.page is not None:
            try:
                self.page.update()
            except RuntimeError:
                # Page already closed
                pass
