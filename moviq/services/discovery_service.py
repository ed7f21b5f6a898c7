"""Page-level use cases composed from the catalog client and favorites store.

Each method returns a small view model that the presentation layer renders
as-is: lists are never ``None``, and failures are reduced to a single
user-facing ``error`` string (plus ``not_found`` for the detail page).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from moviq.clients.tmdb import TMDBClient
from moviq.favorites.store import FavoritesStore
from moviq.genres import (
    DEFAULT_SORT,
    DISCOVERY_TYPES,
    GENRE_NAMES,
    SORT_OPTIONS,
    resolve_genre,
    validate_category,
    validate_sort,
)
from moviq.schemas.error import ErrorType, FetchError
from moviq.schemas.movie import Movie, MovieDetails, MoviesResponse
from moviq.schemas.result import Failure, FetchResult

logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "Failed to fetch movies. Please try again later."
SEARCH_ERROR_MESSAGE = "Failed to search movies. Please try again later."
DETAIL_ERROR_MESSAGE = "Failed to load movie details. Please try again later."
RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."
EMPTY_QUERY_MESSAGE = "Please enter a search query"


def _user_message(error: FetchError, fallback: str) -> str:
    if error.error_type is ErrorType.RATE_LIMITED:
        return RATE_LIMIT_MESSAGE
    if error.error_type in (ErrorType.CONFIGURATION_ERROR, ErrorType.VALIDATION_ERROR):
        return error.message
    return fallback


@dataclass
class HomeFeed:
    trending: list[Movie] = field(default_factory=list)
    recommended: list[Movie] = field(default_factory=list)
    seed: Movie | None = None
    error: str | None = None


@dataclass
class MoviePage:
    movie_id: int
    details: MovieDetails | None = None
    recommendations: list[Movie] = field(default_factory=list)
    is_favorite: bool = False
    not_found: bool = False
    error: str | None = None


@dataclass
class MovieListPage:
    """A paginated list of movies (search results or a discovery listing)."""

    title: str
    movies: list[Movie] = field(default_factory=list)
    page: int = 1
    total_pages: int = 0
    total_results: int = 0
    error: str | None = None

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def is_empty(self) -> bool:
        return not self.movies


def _list_page(
    title: str,
    result: FetchResult[MoviesResponse],
    page: int,
    fallback_message: str,
) -> MovieListPage:
    if isinstance(result, Failure):
        return MovieListPage(
            title=title,
            page=page,
            error=_user_message(result.error, fallback_message),
        )
    response = result.value
    return MovieListPage(
        title=title,
        movies=list(response.results),
        page=response.page,
        total_pages=response.total_pages,
        total_results=response.total_results,
    )


class DiscoveryService:
    """Coordinates catalog fetches with favorites state for each view."""

    def __init__(self, client: TMDBClient, favorites: FavoritesStore) -> None:
        self._client = client
        self._favorites = favorites

    async def home_feed(self) -> HomeFeed:
        """Trending movies plus recommendations seeded by the top trending title."""

        trending = await self._client.get_trending_movies()
        if isinstance(trending, Failure):
            return HomeFeed(error=_user_message(trending.error, FETCH_ERROR_MESSAGE))

        feed = HomeFeed(trending=list(trending.value.results))
        if not feed.trending:
            return feed

        feed.seed = feed.trending[0]
        recommended = await self._client.get_recommended_movies(feed.seed.id)
        if isinstance(recommended, Failure):
            logger.warning(
                "Recommendations for %s unavailable: %s",
                feed.seed.id,
                recommended.error.message,
            )
        else:
            feed.recommended = list(recommended.value.results)
        return feed

    async def movie_page(self, movie_id: int) -> MoviePage:
        """Details and recommendations for one movie.

        A 404 is not an error: the page comes back with ``not_found`` set so the
        view can render its "not found" state.
        """

        page = MoviePage(movie_id=movie_id, is_favorite=self._favorites.is_favorite(movie_id))

        details = await self._client.get_movie_details(movie_id)
        if isinstance(details, Failure):
            if details.error.is_not_found:
                page.not_found = True
            else:
                page.error = _user_message(details.error, DETAIL_ERROR_MESSAGE)
            return page
        page.details = details.value

        recommended = await self._client.get_recommended_movies(movie_id)
        page.recommendations = list(recommended.unwrap_or(MoviesResponse()).results)
        return page

    async def search_page(self, query: str, page: int = 1) -> MovieListPage:
        if not query or not query.strip():
            return MovieListPage(title="Search Movies", error=EMPTY_QUERY_MESSAGE)

        query = query.strip()
        result = await self._client.search_movies(query, page)
        return _list_page(f'Search results for "{query}"', result, page, SEARCH_ERROR_MESSAGE)

    async def discover_page(
        self,
        *,
        category: str | None = None,
        genre: str | None = None,
        sort_by: str = DEFAULT_SORT,
        page: int = 1,
    ) -> MovieListPage:
        """Browse by discovery category or by genre slug.

        Raises:
            ValueError: For unknown categories, genres or sort options, or when
                both ``category`` and ``genre`` are given.
        """

        if category and genre:
            raise ValueError("Choose either a category or a genre, not both")

        if genre:
            genre_id = resolve_genre(genre)
            validate_sort(sort_by)
            slug = "-".join(genre.strip().lower().split())
            title = f"{GENRE_NAMES[slug]} Movies · {SORT_OPTIONS[sort_by]}"
            result = await self._client.discover_movies(genre_id, sort_by, page)
            return _list_page(title, result, page, FETCH_ERROR_MESSAGE)

        category = validate_category(category or "trending")
        result = await self._client.get_movies(category, page)
        return _list_page(DISCOVERY_TYPES[category], result, page, FETCH_ERROR_MESSAGE)

    def favorites_page(self) -> list[Movie]:
        return self._favorites.list()

    def toggle_favorite(self, movie: Movie) -> bool:
        return self._favorites.toggle(movie)

    async def add_favorite_by_id(self, movie_id: int) -> FetchResult[MovieDetails]:
        """Resolve ``movie_id`` against the catalog and add it to favorites."""

        result = await self._client.get_movie_details(movie_id)
        if not isinstance(result, Failure):
            self._favorites.add(result.value)
        return result


__all__ = [
    "DiscoveryService",
    "EMPTY_QUERY_MESSAGE",
    "FETCH_ERROR_MESSAGE",
    "HomeFeed",
    "MovieListPage",
    "MoviePage",
    "RATE_LIMIT_MESSAGE",
]
