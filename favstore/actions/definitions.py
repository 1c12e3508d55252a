"""Reversible favorites actions and the factory that builds them."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from favstore.commands.base import Command
from favstore.core.errors import InvalidArgumentError, UnknownActionTypeError
from favstore.core.types import ActionType, CommandMetadata, Snapshot, is_valid_url
from favstore.persistence.base import (
    FavoritesBackend,
    SyncResult,
    attempt,
    result_from_gather,
)
from favstore.state.state_store import StateStore

logger = logging.getLogger(__name__)


class FavoritesAction(Command):
    """
    Command bound to a StateStore and, optionally, a remote backend.

    Backend calls are best-effort: a failure is logged inside attempt() and
    the local mutation still happens. Without a backend the action is
    local-only.
    """

    def __init__(
        self, description: str, store: StateStore, backend: FavoritesBackend | None = None
    ) -> None:
        super().__init__(description)
        self._store = store
        self._backend = backend

    async def _sync(self, method: str, *args: Any) -> SyncResult | None:
        if self._backend is None:
            return None
        return await attempt(getattr(self._backend, method)(*args), method)

    async def _sync_many(self, method: str, urls: list[str]) -> list[SyncResult] | None:
        """Issue one backend call per url concurrently; individual failures are tolerated."""
        if self._backend is None or not urls:
            return None
        call = getattr(self._backend, method)
        raw = await asyncio.gather(*(call(url) for url in urls), return_exceptions=True)
        results = [result_from_gather(value) for value in raw]
        failed = sum(1 for r in results if not r.ok)
        if failed:
            logger.warning(
                "Backend %s failed for %d/%d URLs, local state updated regardless",
                method, failed, len(urls),
            )
        return results


class AddFavoriteAction(FavoritesAction):
    type = ActionType.ADD_FAVORITE

    def __init__(self, url: str, store: StateStore, backend: FavoritesBackend | None = None) -> None:
        if not is_valid_url(url):
            raise InvalidArgumentError("URL must be a non-empty string")
        super().__init__(f'Add "{url}" to favorites', store, backend)
        self.url = url

    async def execute(self) -> bool:
        await self._sync("add_favorite", self.url)
        added = self._store.add(self.url)
        logger.debug("Added %s: %s", self.url, added)
        return added

    async def undo(self) -> bool:
        await self._sync("remove_favorite", self.url)
        return self._store.remove(self.url)

    def get_metadata(self) -> CommandMetadata:
        metadata = super().get_metadata()
        metadata.url = self.url
        return metadata


class RemoveFavoriteAction(FavoritesAction):
    type = ActionType.REMOVE_FAVORITE

    def __init__(self, url: str, store: StateStore, backend: FavoritesBackend | None = None) -> None:
        if not is_valid_url(url):
            raise InvalidArgumentError("URL must be a non-empty string")
        super().__init__(f'Remove "{url}" from favorites', store, backend)
        self.url = url

    async def execute(self) -> bool:
        await self._sync("remove_favorite", self.url)
        removed = self._store.remove(self.url)
        logger.debug("Removed %s: %s", self.url, removed)
        return removed

    async def undo(self) -> bool:
        await self._sync("add_favorite", self.url)
        return self._store.add(self.url)

    def get_metadata(self) -> CommandMetadata:
        metadata = super().get_metadata()
        metadata.url = self.url
        return metadata


class ClearAllAction(FavoritesAction):
    """
    Empties the store. The pre-clear snapshot is captured at construction and
    refreshed on every execute(), so a redo after intervening changes still
    restores the right set on the following undo.
    """

    type = ActionType.CLEAR_ALL

    def __init__(self, store: StateStore, backend: FavoritesBackend | None = None) -> None:
        self.previous_state: Snapshot | None = store.get_all()
        self.affected_count = len(self.previous_state)
        super().__init__(f"Clear all {self.affected_count} favorites", store, backend)

    async def execute(self) -> bool:
        self.previous_state = self._store.get_all()
        await self._sync("clear_all_favorites")
        self._store.clear()
        logger.debug("Cleared %d favorites", len(self.previous_state))
        return True

    async def undo(self) -> bool:
        if self.previous_state is None:
            return False
        results = await self._sync_many("add_favorite", sorted(self.previous_state))
        if results is not None:
            restored = sum(1 for r in results if r.changed)
            logger.info(
                "Re-added %d/%d favorites to the backend", restored, len(self.previous_state)
            )
        self._store.restore(self.previous_state)
        return True

    def get_metadata(self) -> CommandMetadata:
        metadata = super().get_metadata()
        metadata.affected_count = self.affected_count
        return metadata


class BulkAddAction(FavoritesAction):
    """Adds many URLs as one history entry. Undo removes only what this action added."""

    type = ActionType.BULK_ADD

    def __init__(
        self, urls: Iterable[str], store: StateStore, backend: FavoritesBackend | None = None
    ) -> None:
        if isinstance(urls, str) or not isinstance(urls, Iterable):
            raise InvalidArgumentError("URLs must be a non-empty list of strings")
        candidates = list(urls)
        if not candidates:
            raise InvalidArgumentError("URLs must be a non-empty list of strings")
        valid = list(dict.fromkeys(url for url in candidates if is_valid_url(url)))
        if not valid:
            raise InvalidArgumentError("No valid URLs provided")

        super().__init__(f"Add {len(valid)} URLs to favorites", store, backend)
        self.urls = valid
        self.added_urls: list[str] = []

    async def execute(self) -> bool:
        self.added_urls = []
        await self._sync_many("add_favorite", self.urls)
        for url in self.urls:
            if self._store.add(url):
                self.added_urls.append(url)
        logger.debug("Bulk add: %d/%d new", len(self.added_urls), len(self.urls))
        return len(self.added_urls) > 0

    async def undo(self) -> bool:
        if not self.added_urls:
            return False
        await self._sync_many("remove_favorite", self.added_urls)
        removed = [url for url in self.added_urls if self._store.remove(url)]
        self.added_urls = []
        return len(removed) > 0

    def get_metadata(self) -> CommandMetadata:
        metadata = super().get_metadata()
        metadata.urls = list(self.urls)
        return metadata


def create_action(
    action_type: ActionType | str,
    params: Mapping[str, Any] | None,
    store: StateStore,
    backend: FavoritesBackend | None = None,
) -> FavoritesAction:
    """Build an action by type name, e.g. ``create_action("ADD_FAVORITE", {"url": u}, store)``."""
    params = params or {}
    try:
        kind = ActionType(action_type)
    except ValueError:
        raise UnknownActionTypeError(action_type) from None

    if kind is ActionType.ADD_FAVORITE:
        return AddFavoriteAction(params.get("url"), store, backend)
    if kind is ActionType.REMOVE_FAVORITE:
        return RemoveFavoriteAction(params.get("url"), store, backend)
    if kind is ActionType.CLEAR_ALL:
        return ClearAllAction(store, backend)
    if kind is ActionType.BULK_ADD:
        return BulkAddAction(params.get("urls") or [], store, backend)
    raise UnknownActionTypeError(action_type)


def available_action_types() -> list[str]:
    return [
        ActionType.ADD_FAVORITE.value,
        ActionType.REMOVE_FAVORITE.value,
        ActionType.CLEAR_ALL.value,
        ActionType.BULK_ADD.value,
    ]
