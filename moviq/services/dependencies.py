"""Explicit wiring for the MovIQ services.

There are no module-level singletons: every collaborator is created here and
owned by an :class:`AppContainer`. Initialisation loads favorites from
storage; teardown closes the HTTP client.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx

from moviq.cache import RequestCache
from moviq.clients.tmdb import TMDBClient
from moviq.favorites import FavoritesStore, JsonFileStorage, LocalStorage
from moviq.notifications import ToastQueue
from moviq.services.discovery_service import DiscoveryService
from moviq.settings import AppSettings, get_settings


@dataclass
class AppContainer:
    settings: AppSettings
    cache: RequestCache
    toasts: ToastQueue
    storage: LocalStorage
    favorites: FavoritesStore
    client: TMDBClient
    discovery: DiscoveryService

    async def aclose(self) -> None:
        await self.client.aclose()


def build_container(
    settings: AppSettings | None = None,
    *,
    storage: LocalStorage | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> AppContainer:
    """Construct and initialise every collaborator.

    ``storage`` and ``http_client`` exist for tests and embedding; by default
    favorites live in :attr:`AppSettings.storage_path` and the client creates
    its own ``httpx.AsyncClient``.
    """

    settings = settings or get_settings()
    toasts = ToastQueue()
    cache = RequestCache(settings.cache_ttl_seconds)
    storage = storage if storage is not None else JsonFileStorage(settings.storage_path)
    favorites = FavoritesStore.open(storage, toasts=toasts)
    client = TMDBClient(settings, cache, http_client=http_client)
    return AppContainer(
        settings=settings,
        cache=cache,
        toasts=toasts,
        storage=storage,
        favorites=favorites,
        client=client,
        discovery=DiscoveryService(client, favorites),
    )


@asynccontextmanager
async def open_container(
    settings: AppSettings | None = None,
    *,
    storage: LocalStorage | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> AsyncIterator[AppContainer]:
    """Async context manager around :func:`build_container` that cleans up."""

    container = build_container(settings, storage=storage, http_client=http_client)
    try:
        yield container
    finally:
        await container.aclose()


__all__ = ["AppContainer", "build_container", "open_container"]
