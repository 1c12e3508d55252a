from favstore.persistence.api_backend import ApiBackend
from favstore.persistence.base import FavoritesBackend, SyncResult, attempt
from favstore.persistence.cache import TTLCache
from favstore.persistence.memory import InMemoryBackend

__all__ = [
    "ApiBackend",
    "FavoritesBackend",
    "InMemoryBackend",
    "SyncResult",
    "TTLCache",
    "attempt",
]
