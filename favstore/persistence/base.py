"""Persistence port: the remote backend commands sync their mutations to."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable

logger = logging.getLogger(__name__)


class FavoritesBackend(ABC):
    """
    Remote store of a user's favorites.

    Write methods return True when the backend changed and False when it had
    nothing to do (already present, already absent, already empty). Any
    method may raise; callers in favstore treat that as non-fatal.
    """

    @abstractmethod
    async def add_favorite(self, url: str) -> bool: ...

    @abstractmethod
    async def remove_favorite(self, url: str) -> bool: ...

    @abstractmethod
    async def clear_all_favorites(self) -> bool: ...

    @abstractmethod
    async def get_user_favorites(self) -> list[str]: ...


@dataclass
class SyncResult:
    """Outcome of one best-effort backend call."""

    ok: bool
    value: Any = None
    error: BaseException | None = None

    @property
    def changed(self) -> bool:
        """True only when the call succeeded and the backend reported a change."""
        return self.ok and self.value is True


async def attempt(call: Awaitable[Any], operation: str) -> SyncResult:
    """Await a backend call, turning any exception into a failed SyncResult."""
    try:
        value = await call
    except Exception as exc:
        logger.warning("Backend %s failed, continuing with local state only: %s", operation, exc)
        return SyncResult(ok=False, error=exc)
    return SyncResult(ok=True, value=value)


def result_from_gather(value: Any) -> SyncResult:
    """Map one item of ``asyncio.gather(..., return_exceptions=True)`` to a SyncResult."""
    if isinstance(value, BaseException):
        return SyncResult(ok=False, error=value)
    return SyncResult(ok=True, value=value)
