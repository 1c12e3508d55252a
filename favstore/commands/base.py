"""Abstract reversible command."""

from __future__ import annotations

from abc import ABC, abstractmethod

from favstore.core.types import ActionType, CommandMetadata, utc_timestamp


class Command(ABC):
    """
    A reversible unit of work. execute() and undo() are coroutines and may raise.

    execute() returning exactly False tells the CommandManager the command
    refused to run and must not be recorded.
    """

    type: ActionType = ActionType.UNKNOWN

    def __init__(self, description: str) -> None:
        self.description = description
        self.timestamp = utc_timestamp()

    @abstractmethod
    async def execute(self) -> bool | None: ...

    @abstractmethod
    async def undo(self) -> bool | None: ...

    def get_metadata(self) -> CommandMetadata:
        return CommandMetadata(
            type=self.type,
            description=self.description,
            timestamp=self.timestamp,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.description!r})"
