"""Command manager with a linear undo/redo history."""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable

from favstore.core.errors import InvalidArgumentError
from favstore.core.types import (
    ActionHistory,
    ActionType,
    CommandMetadata,
    HistoryEntry,
    HistoryStatistics,
)

logger = logging.getLogger(__name__)


def _metadata_of(command: Any) -> CommandMetadata:
    get_metadata = getattr(command, "get_metadata", None)
    if callable(get_metadata):
        return get_metadata()
    return CommandMetadata(
        type=getattr(command, "type", ActionType.UNKNOWN),
        description=getattr(command, "description", "No description"),
        timestamp=getattr(command, "timestamp", ""),
    )


def _type_name(command: Any) -> str:
    action_type = getattr(command, "type", ActionType.UNKNOWN)
    return action_type.value if isinstance(action_type, ActionType) else str(action_type)


async def _invoke(method: Callable[[], Any]) -> Any:
    """Call an execute/undo method; await the result only if it is awaitable."""
    result = method()
    if inspect.isawaitable(result):
        result = await result
    return result


class CommandManager:
    """
    Executes commands and keeps them in a linear history with a cursor.

    ``current_index`` points at the last applied command; -1 means nothing is
    applied. Executing a new command after one or more undos discards the
    redo tail. A command's execute/undo may be plain functions or
    coroutine functions.

    Not safe for concurrent use: callers must not start a second
    execute_action/undo/redo while one is awaiting, or the cursor and the
    history can fall out of step with the store.
    """

    def __init__(self) -> None:
        self._history: list[Any] = []
        self._current_index = -1

    @property
    def current_index(self) -> int:
        return self._current_index

    async def execute_action(self, command: Any) -> bool:
        """
        Run command.execute() and record it.

        Exceptions from execute() propagate and nothing is recorded. A result
        of exactly False is a refusal: nothing is recorded and False is returned.
        """
        if command is None or not callable(getattr(command, "execute", None)):
            raise InvalidArgumentError("Command must have an execute method")

        try:
            result = await _invoke(command.execute)
        except Exception:
            logger.exception("Error executing %r", _metadata_of(command))
            raise

        if result is False:
            logger.debug("Command %r declined to execute", command)
            return False

        del self._history[self._current_index + 1 :]
        self._history.append(command)
        self._current_index += 1
        return True

    async def undo(self) -> bool:
        """
        Undo the command at the cursor.

        Returns False both when there is nothing to undo and when the undo
        itself failed; a failure leaves the cursor where it was.
        """
        if self._current_index < 0:
            return False

        command = self._history[self._current_index]
        undo = getattr(command, "undo", None)
        if not callable(undo):
            logger.error("Command %r does not support undo", command)
            return False

        try:
            await _invoke(undo)
        except Exception:
            logger.exception("Error during undo of %r", command)
            return False

        self._current_index -= 1
        return True

    async def redo(self) -> bool:
        """Re-execute the command after the cursor. Rolls the cursor back on failure."""
        if self._current_index >= len(self._history) - 1:
            return False

        self._current_index += 1
        command = self._history[self._current_index]
        try:
            await _invoke(command.execute)
        except Exception:
            logger.exception("Error during redo of %r", command)
            self._current_index -= 1
            return False
        return True

    def can_undo(self) -> bool:
        return self._current_index >= 0

    def can_redo(self) -> bool:
        return self._current_index < len(self._history) - 1

    def get_history(self) -> ActionHistory:
        return ActionHistory(
            actions=[
                HistoryEntry(
                    metadata=_metadata_of(command),
                    index=i,
                    is_current_position=i == self._current_index,
                )
                for i, command in enumerate(self._history)
            ],
            current_index=self._current_index,
            total_actions=len(self._history),
            can_undo=self.can_undo(),
            can_redo=self.can_redo(),
        )

    def clear_history(self, keep_current: bool = False) -> None:
        """Drop the whole history, or with keep_current only the redo tail."""
        if keep_current and self._current_index >= 0:
            del self._history[self._current_index + 1 :]
        else:
            self._history.clear()
            self._current_index = -1

    def get_statistics(self) -> HistoryStatistics:
        action_types: dict[str, int] = {}
        for command in self._history:
            name = _type_name(command)
            action_types[name] = action_types.get(name, 0) + 1

        return HistoryStatistics(
            total_actions=len(self._history),
            current_position=self._current_index,
            action_types=action_types,
            oldest_action=_metadata_of(self._history[0]) if self._history else None,
            newest_action=_metadata_of(self._history[-1]) if self._history else None,
        )
