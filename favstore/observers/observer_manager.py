"""Observer manager: broadcasts snapshots to subscribers."""

from __future__ import annotations

import logging

from favstore.core.errors import InvalidArgumentError
from favstore.core.types import Snapshot, Subscriber

logger = logging.getLogger(__name__)


class ObserverManager:
    """
    Keeps subscriber callbacks in registration order and notifies them.

    A subscriber that raises is logged and skipped; the rest of the pass
    still runs.
    """

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    def subscribe(
        self, callback: Subscriber, initial_state: Snapshot | None = None
    ) -> Subscriber:
        """
        Register callback. When initial_state is given, the callback is invoked
        with it once, synchronously, before this returns.

        Returns the callback so it can be handed straight to unsubscribe().
        """
        if not callable(callback):
            raise InvalidArgumentError("Callback must be callable")

        self._subscribers.append(callback)
        if initial_state is not None:
            self._notify_one(callback, initial_state)
        return callback

    def unsubscribe(self, callback: Subscriber) -> bool:
        try:
            self._subscribers.remove(callback)
        except ValueError:
            return False
        return True

    def notify_all(self, state: Snapshot) -> None:
        # Iterate over a copy: subscribers may (un)subscribe during the pass
        for callback in list(self._subscribers):
            self._notify_one(callback, state)

    def _notify_one(self, callback: Subscriber, state: Snapshot) -> None:
        try:
            callback(state)
        except Exception:
            name = getattr(callback, "__name__", None) or repr(callback)
            logger.exception("Subscriber %s raised while handling a state change", name)

    def get_subscriber_count(self) -> int:
        return len(self._subscribers)

    def is_subscribed(self, callback: Subscriber) -> bool:
        return callback in self._subscribers

    def clear_all(self) -> None:
        self._subscribers.clear()
