from favstore.core.store import FavoritesStore
from favstore.core.errors import (
    BackendError,
    FavoritesError,
    InvalidArgumentError,
    UnknownActionTypeError,
)
from favstore.core.types import (
    ActionHistory,
    ActionType,
    CommandMetadata,
    DebugInfo,
    HistoryEntry,
    HistoryStatistics,
    Resource,
    Snapshot,
    StoreStatistics,
)
from favstore.core.urls import derive_display_name, normalize_url
from favstore.actions.definitions import (
    AddFavoriteAction,
    BulkAddAction,
    ClearAllAction,
    RemoveFavoriteAction,
    available_action_types,
    create_action,
)
from favstore.commands.command_manager import CommandManager
from favstore.observers.observer_manager import ObserverManager
from favstore.persistence.api_backend import ApiBackend
from favstore.persistence.base import FavoritesBackend
from favstore.persistence.memory import InMemoryBackend
from favstore.state.state_store import StateStore

__all__ = [
    "FavoritesStore",
    # Errors
    "BackendError",
    "FavoritesError",
    "InvalidArgumentError",
    "UnknownActionTypeError",
    # Types
    "ActionHistory",
    "ActionType",
    "CommandMetadata",
    "DebugInfo",
    "HistoryEntry",
    "HistoryStatistics",
    "Resource",
    "Snapshot",
    "StoreStatistics",
    # URL helpers
    "derive_display_name",
    "normalize_url",
    # Building blocks
    "AddFavoriteAction",
    "BulkAddAction",
    "ClearAllAction",
    "CommandManager",
    "ObserverManager",
    "RemoveFavoriteAction",
    "StateStore",
    "available_action_types",
    "create_action",
    # Persistence
    "ApiBackend",
    "FavoritesBackend",
    "InMemoryBackend",
]
