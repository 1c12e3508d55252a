from favstore.actions.definitions import (
    AddFavoriteAction,
    BulkAddAction,
    ClearAllAction,
    FavoritesAction,
    RemoveFavoriteAction,
    available_action_types,
    create_action,
)

__all__ = [
    "AddFavoriteAction",
    "BulkAddAction",
    "ClearAllAction",
    "FavoritesAction",
    "RemoveFavoriteAction",
    "available_action_types",
    "create_action",
]
