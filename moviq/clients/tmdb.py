"""TMDB API client."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from moviq.cache import (
    RequestCache,
    detail_key,
    discover_key,
    list_key,
    recommendations_key,
    search_key,
    trending_key,
)
from moviq.genres import DEFAULT_SORT, validate_category, validate_sort
from moviq.retry import ApiError, query_with_retries
from moviq.schemas.error import ErrorType, FetchError
from moviq.schemas.movie import MovieDetails, MoviesResponse
from moviq.schemas.result import Failure, FetchResult, Success
from moviq.settings import AppSettings

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

IMAGE_SIZES = frozenset({"w92", "w154", "w185", "w342", "w500", "w780", "w1280", "original"})
TRENDING_WINDOWS = frozenset({"day", "week"})
MAX_PAGE = 500

_CATEGORY_ENDPOINTS: dict[str, str] = {
    "top-rated": "/movie/top_rated",
    "upcoming": "/movie/upcoming",
    "now-playing": "/movie/now_playing",
}


def build_image_url(base_url: str, path: str | None, size: str) -> str | None:
    """Join the CDN base, a size token and an image path fragment."""

    if not path:
        return None
    if size not in IMAGE_SIZES:
        raise ValueError(f"Unsupported image size: {size!r}")
    return f"{base_url.rstrip('/')}/{size}{path}"


def _failure(error_type: ErrorType, message: str, **extra: Any) -> Failure:
    return Failure(FetchError(error_type=error_type, message=message, **extra))


class TMDBClient:
    """Async client for The Movie Database (TMDB) API.

    Every fetch goes through the same pipeline: request cache lookup, a
    retry-wrapped GET, schema validation, cache store. Nothing raises for
    expected failures; callers receive :class:`Success` or :class:`Failure`.
    """

    def __init__(
        self,
        settings: AppSettings,
        cache: RequestCache | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self.cache = cache if cache is not None else RequestCache(settings.cache_ttl_seconds)
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=settings.request_timeout_seconds,
            headers={"Accept": "application/json"},
        )
        if not settings.has_api_key:
            logger.debug("TMDB_API_KEY not set; catalog requests are disabled")

    async def __aenter__(self) -> "TMDBClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    def _url(self, endpoint: str) -> str:
        return f"{self.settings.tmdb_base_url.rstrip('/')}{endpoint}"

    def _params(self, params: Mapping[str, Any] | None) -> dict[str, Any]:
        merged: dict[str, Any] = {
            "api_key": self.settings.tmdb_api_key,
            "language": self.settings.tmdb_language,
        }
        if params:
            merged.update({key: value for key, value in params.items() if value is not None})
        return merged

    def _error_from(self, exc: ApiError) -> FetchError:
        if exc.status == 404:
            error_type = ErrorType.NOT_FOUND
        elif exc.status == 429:
            error_type = ErrorType.RATE_LIMITED
            logger.error("Rate limit exceeded. Please try again later.")
        elif exc.status is not None:
            error_type = ErrorType.HTTP_ERROR
        else:
            error_type = ErrorType.NETWORK_ERROR
        return FetchError(
            error_type=error_type,
            message=exc.message,
            status_code=exc.status,
            retry_after=exc.retry_after,
        )

    async def _fetch(
        self,
        endpoint: str,
        model: type[M],
        *,
        cache_key: str | None,
        params: Mapping[str, Any] | None = None,
    ) -> FetchResult[M]:
        """Run the cache -> retry -> validate -> cache pipeline for one GET."""

        if not self.settings.has_api_key:
            return _failure(
                ErrorType.CONFIGURATION_ERROR,
                "TMDB_API_KEY is not configured",
            )

        if cache_key is not None:
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.debug("Using cached payload for %s", endpoint)
                return Success(cached)

        url = self._url(endpoint)
        request_params = self._params(params)

        async def _send() -> httpx.Response:
            response = await self._http.get(url, params=request_params)
            response.raise_for_status()
            return response

        try:
            response = await query_with_retries(
                _send,
                retries=self.settings.retry_attempts,
                delay=self.settings.retry_initial_delay_seconds,
            )
        except ApiError as exc:
            logger.error("TMDB API error for %s: %s", endpoint, exc.message)
            return Failure(self._error_from(exc))

        try:
            value = model.model_validate(response.json())
        except ValidationError as exc:
            logger.error("Malformed TMDB response for %s: %s", endpoint, exc)
            return _failure(
                ErrorType.MALFORMED_RESPONSE,
                f"Unexpected response shape from {endpoint}",
                status_code=response.status_code,
            )
        except ValueError as exc:
            logger.error("TMDB response for %s is not valid JSON: %s", endpoint, exc)
            return _failure(
                ErrorType.MALFORMED_RESPONSE,
                f"Response from {endpoint} is not valid JSON",
                status_code=response.status_code,
            )

        if cache_key is not None:
            self.cache.set(cache_key, value)
        return Success(value)

    @staticmethod
    def _check_page(page: int) -> Failure | None:
        if page < 1 or page > MAX_PAGE:
            return _failure(
                ErrorType.VALIDATION_ERROR,
                f"Page must be between 1 and {MAX_PAGE}",
            )
        return None

    async def get_trending_movies(
        self, window: str = "week", page: int = 1
    ) -> FetchResult[MoviesResponse]:
        """Get movies trending over the last day or week."""

        if window not in TRENDING_WINDOWS:
            return _failure(ErrorType.VALIDATION_ERROR, f"Unknown trending window: {window!r}")
        if invalid := self._check_page(page):
            return invalid
        return await self._fetch(
            f"/trending/movie/{window}",
            MoviesResponse,
            cache_key=trending_key(window, page),
            params={"page": page},
        )

    async def _get_category(self, category: str, page: int) -> FetchResult[MoviesResponse]:
        if invalid := self._check_page(page):
            return invalid
        return await self._fetch(
            _CATEGORY_ENDPOINTS[category],
            MoviesResponse,
            cache_key=list_key(category, page),
            params={"page": page},
        )

    async def get_top_rated_movies(self, page: int = 1) -> FetchResult[MoviesResponse]:
        return await self._get_category("top-rated", page)

    async def get_upcoming_movies(self, page: int = 1) -> FetchResult[MoviesResponse]:
        return await self._get_category("upcoming", page)

    async def get_now_playing_movies(self, page: int = 1) -> FetchResult[MoviesResponse]:
        return await self._get_category("now-playing", page)

    async def get_movies(self, category: str, page: int = 1) -> FetchResult[MoviesResponse]:
        """Dispatch to one of the discovery categories (``trending``, ``top-rated``...)."""

        validate_category(category)
        if category == "trending":
            return await self.get_trending_movies(page=page)
        return await self._get_category(category, page)

    async def search_movies(self, query: str, page: int = 1) -> FetchResult[MoviesResponse]:
        """Search for movies by title."""

        if not query or not query.strip():
            return _failure(ErrorType.VALIDATION_ERROR, "Please enter a search query")
        if invalid := self._check_page(page):
            return invalid
        return await self._fetch(
            "/search/movie",
            MoviesResponse,
            cache_key=search_key(query, page),
            params={"query": query.strip(), "page": page},
        )

    async def get_movie_details(self, movie_id: int) -> FetchResult[MovieDetails]:
        """Get detailed movie information; a 404 becomes ``NOT_FOUND``."""

        result = await self._fetch(
            f"/movie/{movie_id}",
            MovieDetails,
            cache_key=detail_key(movie_id),
        )
        if isinstance(result, Failure) and result.error.is_not_found:
            logger.info("Movie with ID %s not found", movie_id)
        return result

    async def get_recommended_movies(
        self, movie_id: int, page: int = 1
    ) -> FetchResult[MoviesResponse]:
        """Get recommendations seeded by ``movie_id``."""

        if invalid := self._check_page(page):
            return invalid
        return await self._fetch(
            f"/movie/{movie_id}/recommendations",
            MoviesResponse,
            cache_key=recommendations_key(movie_id, page),
            params={"page": page},
        )

    async def discover_movies(
        self,
        genre_id: int | None = None,
        sort_by: str = DEFAULT_SORT,
        page: int = 1,
    ) -> FetchResult[MoviesResponse]:
        """Browse the catalog filtered by genre and ordered by ``sort_by``."""

        validate_sort(sort_by)
        if invalid := self._check_page(page):
            return invalid
        return await self._fetch(
            "/discover/movie",
            MoviesResponse,
            cache_key=discover_key(genre_id, sort_by, page),
            params={"with_genres": genre_id, "sort_by": sort_by, "page": page},
        )

    def poster_url(self, poster_path: str | None, size: str = "w500") -> str | None:
        """Get full poster URL."""

        return build_image_url(self.settings.image_base_url, poster_path, size)

    def backdrop_url(self, backdrop_path: str | None, size: str = "original") -> str | None:
        """Get full backdrop URL."""

        return build_image_url(self.settings.image_base_url, backdrop_path, size)


__all__ = ["IMAGE_SIZES", "TMDBClient", "build_image_url"]
