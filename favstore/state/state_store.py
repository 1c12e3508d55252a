"""State store holding the canonical set of favorite URLs."""

from __future__ import annotations

from collections.abc import Set

from favstore.core.errors import InvalidArgumentError
from favstore.core.types import Snapshot, is_valid_url


def _require_url(url: object) -> None:
    if not is_valid_url(url):
        raise InvalidArgumentError("URL must be a non-empty string")


class StateStore:
    """
    Owns the favorites set. Every read hands out a frozenset copy, so nothing
    outside this class can mutate the canonical state.

    Backed by a dict to keep insertion order for get_all_as_list().
    """

    def __init__(self) -> None:
        self._favorites: dict[str, None] = {}

    def add(self, url: str) -> bool:
        """Insert url. Returns False if it was already present."""
        _require_url(url)
        if url in self._favorites:
            return False
        self._favorites[url] = None
        return True

    def remove(self, url: str) -> bool:
        """Remove url. Returns False if it was absent."""
        _require_url(url)
        if url not in self._favorites:
            return False
        del self._favorites[url]
        return True

    def has(self, url: str) -> bool:
        return isinstance(url, str) and url in self._favorites

    def get_all(self) -> Snapshot:
        return frozenset(self._favorites)

    def get_all_as_list(self) -> list[str]:
        return list(self._favorites)

    def get_count(self) -> int:
        return len(self._favorites)

    def is_empty(self) -> bool:
        return not self._favorites

    def clear(self) -> Snapshot:
        """Empty the store and return what it held."""
        previous = self.get_all()
        self._favorites.clear()
        return previous

    def restore(self, snapshot: Snapshot) -> None:
        """Replace the entire state with a copy of snapshot."""
        if not isinstance(snapshot, Set):
            raise InvalidArgumentError(
                f"Snapshot must be a set, got {type(snapshot).__name__}"
            )
        for url in snapshot:
            _require_url(url)
        self._favorites = dict.fromkeys(snapshot)
