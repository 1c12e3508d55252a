"""Core type definitions shared across favstore layers."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, FrozenSet

# Immutable point-in-time copy of the favorites set
Snapshot = FrozenSet[str]

Subscriber = Callable[[Snapshot], None]


class ActionType(str, Enum):
    ADD_FAVORITE = "ADD_FAVORITE"
    REMOVE_FAVORITE = "REMOVE_FAVORITE"
    CLEAR_ALL = "CLEAR_ALL"
    BULK_ADD = "BULK_ADD"
    UNKNOWN = "UNKNOWN"


@dataclass
class CommandMetadata:
    type: ActionType
    description: str
    timestamp: str
    url: str | None = None
    urls: list[str] | None = None
    affected_count: int | None = None


@dataclass
class HistoryEntry:
    metadata: CommandMetadata
    index: int
    is_current_position: bool


@dataclass
class ActionHistory:
    actions: list[HistoryEntry]
    current_index: int
    total_actions: int
    can_undo: bool
    can_redo: bool


@dataclass
class HistoryStatistics:
    total_actions: int
    current_position: int
    action_types: dict[str, int] = field(default_factory=dict)
    oldest_action: CommandMetadata | None = None
    newest_action: CommandMetadata | None = None


@dataclass
class StoreStatistics:
    """History statistics plus the façade's view of the favorites set."""

    history: HistoryStatistics
    favorites_count: int
    subscriber_count: int
    is_empty: bool


@dataclass
class DebugInfo:
    state_count: int
    subscriber_count: int
    history_length: int
    can_undo: bool
    can_redo: bool
    is_empty: bool


@dataclass
class Resource:
    url: str
    name: str = ""


def utc_timestamp() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def is_valid_url(value: object) -> bool:
    """True for a non-empty string."""
    return isinstance(value, str) and len(value) > 0
