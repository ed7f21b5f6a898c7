"""Favorites domain components split by responsibility.

``persistence`` holds the string-keyed storage backends; ``store`` holds the
ordered, de-duplicated favorites list that writes through to them.
"""

from .persistence import (
    JsonFileStorage,
    LocalStorage,
    MemoryStorage,
    StorageCorruptedError,
)
from .store import FAVORITES_STORAGE_KEY, FavoritesStore

__all__ = [
    "FAVORITES_STORAGE_KEY",
    "FavoritesStore",
    "JsonFileStorage",
    "LocalStorage",
    "MemoryStorage",
    "StorageCorruptedError",
]
