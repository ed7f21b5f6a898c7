"""Favorites list mirrored to durable local storage.

The store is the only durable state in MovIQ. It keeps an ordered list of
:class:`~moviq.schemas.movie.Movie` records, unique by ``id``, and rewrites the
full snapshot to storage synchronously inside every mutation, so persisted
order always matches invocation order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from pydantic import TypeAdapter, ValidationError

from moviq.favorites.persistence import LocalStorage, StorageCorruptedError
from moviq.notifications import ToastQueue
from moviq.schemas.movie import Movie, MovieDetails

logger = logging.getLogger(__name__)

FAVORITES_STORAGE_KEY = "favorites"
LOAD_ERROR_MESSAGE = "Error loading favorites. Please try again."

_snapshot_adapter = TypeAdapter(list[Movie])


class FavoritesStore:
    """In-memory favorites list with write-through persistence."""

    def __init__(
        self,
        storage: LocalStorage,
        *,
        toasts: ToastQueue | None = None,
        storage_key: str = FAVORITES_STORAGE_KEY,
    ) -> None:
        self._storage = storage
        self._toasts = toasts if toasts is not None else ToastQueue()
        self._storage_key = storage_key
        self._movies: list[Movie] = []
        self._loaded = False

    @classmethod
    def open(
        cls,
        storage: LocalStorage,
        *,
        toasts: ToastQueue | None = None,
        storage_key: str = FAVORITES_STORAGE_KEY,
    ) -> "FavoritesStore":
        """Construct a store and rehydrate it from ``storage``."""

        store = cls(storage, toasts=toasts, storage_key=storage_key)
        store.load()
        return store

    def load(self) -> None:
        """Rehydrate from the stored snapshot.

        A malformed snapshot is discarded: the slot is removed, the store
        starts empty and an error toast tells the user what happened.
        """

        self._movies = []
        self._loaded = True

        try:
            raw = self._storage.get_item(self._storage_key)
            if raw is None:
                return
            movies = _snapshot_adapter.validate_json(raw)
        except (ValidationError, StorageCorruptedError) as exc:
            logger.error("Error parsing stored favorites: %s", exc)
            self._storage.remove_item(self._storage_key)
            self._toasts.add(LOAD_ERROR_MESSAGE, "error")
            return

        seen: set[int] = set()
        for movie in movies:
            if movie.id in seen:
                continue
            seen.add(movie.id)
            self._movies.append(movie)
        logger.debug("Loaded %d favorites", len(self._movies))

    def _commit(self, movies: list[Movie]) -> None:
        """Write ``movies`` to storage, then adopt them as the in-memory list."""

        snapshot = _snapshot_adapter.dump_json(movies).decode("utf-8")
        self._storage.set_item(self._storage_key, snapshot)
        self._movies = movies

    def add(self, movie: Movie) -> bool:
        """Append ``movie`` unless its id is already present.

        Returns:
            ``True`` when the movie was added, ``False`` for a duplicate.
        """

        if self.is_favorite(movie.id):
            return False

        if isinstance(movie, MovieDetails):
            movie = movie.as_movie()
        self._commit([*self._movies, movie])
        self._toasts.add(f'"{movie.title}" added to favorites', "success")
        return True

    def remove(self, movie_id: int) -> bool:
        """Drop the favorite with ``movie_id``; a missing id is a no-op."""

        for index, movie in enumerate(self._movies):
            if movie.id == movie_id:
                self._commit(self._movies[:index] + self._movies[index + 1 :])
                self._toasts.add(f'"{movie.title}" removed from favorites', "info")
                return True
        return False

    def toggle(self, movie: Movie) -> bool:
        """Flip membership for ``movie`` and return the new state."""

        if self.is_favorite(movie.id):
            self.remove(movie.id)
            return False
        self.add(movie)
        return True

    def clear(self) -> int:
        """Remove every favorite and return how many were dropped."""

        removed = len(self._movies)
        self._commit([])
        if removed:
            self._toasts.add(f"Removed {removed} favorites", "info")
        return removed

    def is_favorite(self, movie_id: int) -> bool:
        return any(movie.id == movie_id for movie in self._movies)

    def get(self, movie_id: int) -> Movie | None:
        for movie in self._movies:
            if movie.id == movie_id:
                return movie
        return None

    def list(self) -> list[Movie]:
        """Return favorites in insertion order (a copy)."""

        return list(self._movies)

    @property
    def loaded(self) -> bool:
        return self._loaded

    def __len__(self) -> int:
        return len(self._movies)

    def __iter__(self) -> Iterator[Movie]:
        return iter(list(self._movies))

    def __contains__(self, movie_id: object) -> bool:
        return isinstance(movie_id, int) and self.is_favorite(movie_id)


__all__ = ["FAVORITES_STORAGE_KEY", "FavoritesStore", "LOAD_ERROR_MESSAGE"]
