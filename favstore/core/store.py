"""FavoritesStore, the main orchestrator class."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from favstore.actions.definitions import (
    AddFavoriteAction,
    BulkAddAction,
    ClearAllAction,
    FavoritesAction,
    RemoveFavoriteAction,
)
from favstore.commands.command_manager import CommandManager
from favstore.core.errors import InvalidArgumentError
from favstore.core.types import (
    ActionHistory,
    DebugInfo,
    Snapshot,
    StoreStatistics,
    Subscriber,
)
from favstore.core.urls import normalize_url
from favstore.observers.observer_manager import ObserverManager
from favstore.persistence.base import FavoritesBackend
from favstore.state.state_store import StateStore

logger = logging.getLogger(__name__)


def _normalize(url: object) -> object:
    # Non-strings pass through untouched so validation reports them as such
    return normalize_url(url) if isinstance(url, str) else url


class FavoritesStore:
    """
    Reactive, undoable set of favorite URLs.

    Usage:
        store = await FavoritesStore.from_backend(backend)
        store.subscribe(render)          # render(snapshot) fires immediately
        await store.add_favorite("github.com")
        await store.undo()

    Every mutation runs as a command through the CommandManager, and
    subscribers are notified exactly once per successful mutation. Mutating
    methods assume a single caller: do not run two of them concurrently.
    """

    def __init__(self, *, backend: FavoritesBackend | None = None) -> None:
        self._backend = backend
        self._state = StateStore()
        self._observers = ObserverManager()
        self._commands = CommandManager()

    @classmethod
    async def from_backend(cls, backend: FavoritesBackend) -> FavoritesStore:
        """
        Build a store wired to backend and load the user's favorites once.

        The initial load creates no history entry and sends no notification.
        If it fails the store starts empty.
        """
        store = cls(backend=backend)
        try:
            urls = await backend.get_user_favorites()
        except Exception as exc:
            logger.warning("Initial favorites load failed, starting empty: %s", exc)
            return store
        store.hydrate(urls, notify=False)
        logger.info("Loaded %d favorites from backend", store.get_count())
        return store

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _notify(self) -> None:
        self._observers.notify_all(self._state.get_all())

    async def _execute_and_notify(self, action: FavoritesAction) -> bool:
        executed = await self._commands.execute_action(action)
        if executed:
            self._notify()
        return executed

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def add_favorite(self, url: str) -> bool:
        url = _normalize(url)
        if self._state.has(url):
            return False
        return await self._execute_and_notify(AddFavoriteAction(url, self._state, self._backend))

    async def remove_favorite(self, url: str) -> bool:
        url = _normalize(url)
        if not self._state.has(url):
            return False
        return await self._execute_and_notify(RemoveFavoriteAction(url, self._state, self._backend))

    async def clear_all(self) -> bool:
        if self._state.is_empty():
            return False
        return await self._execute_and_notify(ClearAllAction(self._state, self._backend))

    async def add_multiple(self, urls: Iterable[str]) -> bool:
        """Add several URLs as one undoable step. Duplicates are allowed and skipped."""
        if isinstance(urls, str) or not isinstance(urls, Iterable):
            normalized = urls
        else:
            normalized = [_normalize(url) for url in urls]
        return await self._execute_and_notify(BulkAddAction(normalized, self._state, self._backend))

    async def undo(self) -> bool:
        undone = await self._commands.undo()
        if undone:
            self._notify()
        return undone

    async def redo(self) -> bool:
        redone = await self._commands.redo()
        if redone:
            self._notify()
        return redone

    def hydrate(self, urls: Iterable[str], *, notify: bool = True) -> None:
        """
        Replace the store contents outside of the command history.

        Meant for syncing with the backend on startup; it cannot be undone.
        """
        if isinstance(urls, str) or not isinstance(urls, Iterable):
            raise InvalidArgumentError("hydrate() expects a collection of URLs")
        self._state.restore(frozenset(_normalize(url) for url in urls))
        if notify:
            self._notify()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def is_favorite(self, url: str) -> bool:
        return self._state.has(_normalize(url))

    def get_all_favorites(self) -> list[str]:
        return self._state.get_all_as_list()

    def get_snapshot(self) -> Snapshot:
        return self._state.get_all()

    def get_count(self) -> int:
        return self._state.get_count()

    def is_empty(self) -> bool:
        return self._state.is_empty()

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Subscriber:
        """Register callback; it is called right away with the current snapshot."""
        return self._observers.subscribe(callback, self._state.get_all())

    def unsubscribe(self, callback: Subscriber) -> bool:
        return self._observers.unsubscribe(callback)

    def get_subscriber_count(self) -> int:
        return self._observers.get_subscriber_count()

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def can_undo(self) -> bool:
        return self._commands.can_undo()

    def can_redo(self) -> bool:
        return self._commands.can_redo()

    def get_action_history(self) -> ActionHistory:
        return self._commands.get_history()

    def clear_history(self, keep_current: bool = False) -> None:
        self._commands.clear_history(keep_current)

    def get_statistics(self) -> StoreStatistics:
        return StoreStatistics(
            history=self._commands.get_statistics(),
            favorites_count=self._state.get_count(),
            subscriber_count=self._observers.get_subscriber_count(),
            is_empty=self._state.is_empty(),
        )

    def get_debug_info(self) -> DebugInfo:
        return DebugInfo(
            state_count=self._state.get_count(),
            subscriber_count=self._observers.get_subscriber_count(),
            history_length=self._commands.get_history().total_actions,
            can_undo=self._commands.can_undo(),
            can_redo=self._commands.can_redo(),
            is_empty=self._state.is_empty(),
        )
