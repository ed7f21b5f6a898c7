"""In-process request cache with time-based expiration.

Entries are stored as ``(captured_at, payload)`` tuples keyed by strings that
the helpers at the bottom of this module derive from the endpoint and its
parameters. Expiry is checked lazily: an entry older than the TTL is dropped
the first time it is read.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from hashlib import sha256
from typing import Any

from moviq.settings import DEFAULT_CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)

_TRENDING_PREFIX = "movies:trending"
_LIST_PREFIX = "movies:list"
_DETAIL_PREFIX = "movies:detail"
_SEARCH_PREFIX = "movies:search"
_RECOMMENDATIONS_PREFIX = "movies:recommended"
_DISCOVER_PREFIX = "movies:discover"

Clock = Callable[[], float]


class RequestCache:
    """Flat key -> payload map whose entries expire after ``ttl`` seconds.

    There is no size bound; payloads are small and the process is short-lived.
    The cache is owned by whoever constructs it (see
    :mod:`moviq.services.dependencies`) and is never persisted.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_CACHE_TTL_SECONDS,
        *,
        clock: Clock = time.monotonic,
    ) -> None:
        if ttl <= 0:
            raise ValueError("Cache TTL must be a positive number of seconds")
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}

    def get(self, key: str) -> Any | None:
        """Return the payload stored under ``key`` unless it has expired."""

        entry = self._entries.get(key)
        if entry is None:
            return None

        captured_at, payload = entry
        if self._clock() - captured_at > self.ttl:
            self._entries.pop(key, None)
            logger.debug("Cache entry %s expired", key)
            return None

        logger.debug("Cache hit for %s", key)
        return payload

    def set(self, key: str, payload: Any) -> None:
        """Store ``payload`` under ``key`` stamped with the current time."""

        self._entries[key] = (self._clock(), payload)

    def evict(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Remove every entry."""

        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        # Raw membership; does not apply or enforce the TTL.
        return key in self._entries


def _digest(*parts: str) -> str:
    return sha256("|".join(parts).encode("utf-8")).hexdigest()


def trending_key(window: str, page: int = 1) -> str:
    return f"{_TRENDING_PREFIX}:{window}:{page}"


def list_key(category: str, page: int = 1) -> str:
    return f"{_LIST_PREFIX}:{category}:{page}"


def detail_key(movie_id: int) -> str:
    return f"{_DETAIL_PREFIX}:{movie_id}"


def search_key(query: str, page: int = 1) -> str:
    normalized = " ".join(query.split()).lower()
    return f"{_SEARCH_PREFIX}:{_digest(normalized, str(page))}"


def recommendations_key(movie_id: int, page: int = 1) -> str:
    return f"{_RECOMMENDATIONS_PREFIX}:{movie_id}:{page}"


def discover_key(genre_id: int | None, sort_by: str, page: int = 1) -> str:
    genre_part = str(genre_id) if genre_id is not None else ""
    return f"{_DISCOVER_PREFIX}:{_digest(genre_part, sort_by, str(page))}"


__all__ = [
    "RequestCache",
    "detail_key",
    "discover_key",
    "list_key",
    "recommendations_key",
    "search_key",
    "trending_key",
]
