"""Exception hierarchy for favstore."""

from __future__ import annotations


class FavoritesError(Exception):
    """Base class for all favstore errors."""


class InvalidArgumentError(FavoritesError, ValueError):
    """Malformed input: empty/non-string URL, non-callable subscriber, bad snapshot."""


class UnknownActionTypeError(FavoritesError, ValueError):
    def __init__(self, action_type: object) -> None:
        super().__init__(f"Unknown action type: {action_type!r}")
        self.action_type = action_type


class BackendError(FavoritesError):
    """The remote favorites backend could not complete a request."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status
