"""In-process backend, for demos and for exercising the degradation path."""

from __future__ import annotations

from favstore.core.errors import BackendError
from favstore.persistence.base import FavoritesBackend


class InMemoryBackend(FavoritesBackend):
    """
    Set-backed FavoritesBackend.

    Setting ``fail = True`` makes every call raise BackendError, which is how
    an unreachable server looks to the commands.
    """

    def __init__(self, initial: list[str] | None = None, *, fail: bool = False) -> None:
        self._favorites: dict[str, None] = dict.fromkeys(initial or [])
        self.fail = fail
        self.calls: list[tuple[str, str | None]] = []

    def _check(self, operation: str, url: str | None = None) -> None:
        self.calls.append((operation, url))
        if self.fail:
            raise BackendError(f"{operation} unavailable")

    async def add_favorite(self, url: str) -> bool:
        self._check("add_favorite", url)
        if url in self._favorites:
            return False
        self._favorites[url] = None
        return True

    async def remove_favorite(self, url: str) -> bool:
        self._check("remove_favorite", url)
        if url not in self._favorites:
            return False
        del self._favorites[url]
        return True

    async def clear_all_favorites(self) -> bool:
        self._check("clear_all_favorites")
        had_any = bool(self._favorites)
        self._favorites.clear()
        return had_any

    async def get_user_favorites(self) -> list[str]:
        self._check("get_user_favorites")
        return list(self._favorites)

    @property
    def favorites(self) -> list[str]:
        return list(self._favorites)
