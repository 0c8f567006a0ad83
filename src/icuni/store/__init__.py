"""Client-side state: the draft project store and its persistence."""

from .app_store import AppStore
from .quick_view import QuickViewCoordinator
from .repository import DraftRepository, JsonFileRepository, MemoryRepository, StorageError

__all__ = [
    "AppStore",
    "QuickViewCoordinator",
    "DraftRepository",
    "JsonFileRepository",
    "MemoryRepository",
    "StorageError",
]
