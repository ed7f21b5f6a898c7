"""Tests for the TMDB client fetch pipeline using a mocked transport."""

from __future__ import annotations

import httpx
import pytest
from pydantic import ValidationError

from moviq.cache import RequestCache
from moviq.clients.tmdb import TMDBClient, build_image_url
from moviq.schemas.error import ErrorType
from moviq.schemas.movie import MovieDetails, MoviesResponse
from moviq.schemas.result import Failure, Success
from moviq.settings import AppSettings
from tests.moviq.support.tmdb_fakes import (
    FakeClock,
    FakeTMDB,
    details_payload,
    list_payload,
    movie_payload,
)

TRENDING = "/trending/movie/week"


def _trending_payload() -> dict:
    return list_payload(
        movie_payload(27205, "Inception"),
        movie_payload(155, "The Dark Knight"),
        total_pages=3,
    )


@pytest.mark.asyncio
async def test_trending_sends_key_language_and_page(
    tmdb_client: TMDBClient, fake_tmdb: FakeTMDB
) -> None:
    fake_tmdb.add(TRENDING, json=_trending_payload())

    result = await tmdb_client.get_trending_movies()

    assert isinstance(result, Success)
    assert isinstance(result.value, MoviesResponse)
    assert [movie.id for movie in result.value.results] == [27205, 155]
    assert result.value.has_next_page

    (request,) = fake_tmdb.requests_for(TRENDING)
    assert request.method == "GET"
    assert request.url.params["api_key"] == "test-key"
    assert request.url.params["language"] == "en-US"
    assert request.url.params["page"] == "1"


@pytest.mark.asyncio
async def test_successful_response_is_cached(
    tmdb_client: TMDBClient, fake_tmdb: FakeTMDB, clock: FakeClock
) -> None:
    fake_tmdb.add(TRENDING, json=_trending_payload())

    first = await tmdb_client.get_trending_movies()
    clock.advance(299)
    second = await tmdb_client.get_trending_movies()

    assert len(fake_tmdb.requests_for(TRENDING)) == 1
    assert second.value is first.value


@pytest.mark.asyncio
async def test_expired_cache_entry_triggers_new_request(
    tmdb_client: TMDBClient, fake_tmdb: FakeTMDB, clock: FakeClock
) -> None:
    fake_tmdb.add(TRENDING, json=_trending_payload())

    await tmdb_client.get_trending_movies()
    clock.advance(301)
    await tmdb_client.get_trending_movies()

    assert len(fake_tmdb.requests_for(TRENDING)) == 2


@pytest.mark.asyncio
async def test_pages_are_cached_separately(
    tmdb_client: TMDBClient, fake_tmdb: FakeTMDB
) -> None:
    fake_tmdb.add(TRENDING, json=_trending_payload())

    await tmdb_client.get_trending_movies(page=1)
    await tmdb_client.get_trending_movies(page=2)

    pages = [request.url.params["page"] for request in fake_tmdb.requests_for(TRENDING)]
    assert pages == ["1", "2"]


@pytest.mark.asyncio
async def test_movie_details_not_found(
    tmdb_client: TMDBClient, fake_tmdb: FakeTMDB, sleeps: list[float]
) -> None:
    result = await tmdb_client.get_movie_details(999999)

    assert isinstance(result, Failure)
    assert result.error.is_not_found
    assert result.error.status_code == 404
    assert result.value is None
    assert len(fake_tmdb.requests_for("/movie/999999")) == 1
    assert sleeps == []


@pytest.mark.asyncio
async def test_movie_details_derive_genre_ids(
    tmdb_client: TMDBClient, fake_tmdb: FakeTMDB
) -> None:
    fake_tmdb.add("/movie/27205", json=details_payload(27205, "Inception"))

    result = await tmdb_client.get_movie_details(27205)

    assert isinstance(result, Success)
    details = result.value
    assert isinstance(details, MovieDetails)
    assert details.genre_ids == (28, 878)
    assert [genre.name for genre in details.genres] == ["Action", "Science Fiction"]
    assert details.runtime == 148


@pytest.mark.asyncio
async def test_rate_limit_then_success_is_retried(
    tmdb_client: TMDBClient, fake_tmdb: FakeTMDB, sleeps: list[float]
) -> None:
    fake_tmdb.add(TRENDING, status=429, json={"status_code": 25})
    fake_tmdb.add(TRENDING, json=_trending_payload())

    result = await tmdb_client.get_trending_movies()

    assert result.ok
    assert len(fake_tmdb.requests_for(TRENDING)) == 2
    assert sleeps == [1.0]


@pytest.mark.asyncio
async def test_persistent_rate_limit_becomes_rate_limited_failure(
    tmdb_client: TMDBClient, fake_tmdb: FakeTMDB, sleeps: list[float]
) -> None:
    fake_tmdb.add(TRENDING, status=429, json={"status_code": 25}, headers={"Retry-After": "2"})

    result = await tmdb_client.get_trending_movies()

    assert isinstance(result, Failure)
    assert result.error.is_rate_limited
    assert result.error.retry_after == 2.0
    assert sleeps == [2.0, 2.0, 2.0]


@pytest.mark.asyncio
async def test_server_errors_exhaust_retries(
    tmdb_client: TMDBClient, fake_tmdb: FakeTMDB, sleeps: list[float]
) -> None:
    fake_tmdb.add(TRENDING, status=500, json={"status_code": 11})

    result = await tmdb_client.get_trending_movies()

    assert isinstance(result, Failure)
    assert result.error_type is ErrorType.HTTP_ERROR
    assert result.error.status_code == 500
    assert len(fake_tmdb.requests_for(TRENDING)) == 4
    assert sleeps == [1.0, 2.0, 4.0]


@pytest.mark.asyncio
async def test_transport_failure_becomes_network_error(
    tmdb_client: TMDBClient, fake_tmdb: FakeTMDB, sleeps: list[float]
) -> None:
    fake_tmdb.fail(TRENDING, httpx.ConnectError("connection refused"))

    result = await tmdb_client.get_trending_movies()

    assert isinstance(result, Failure)
    assert result.error_type is ErrorType.NETWORK_ERROR
    assert result.error.status_code is None
    assert len(fake_tmdb.requests_for(TRENDING)) == 4


@pytest.mark.asyncio
async def test_malformed_payload_is_not_cached(
    tmdb_client: TMDBClient, fake_tmdb: FakeTMDB
) -> None:
    fake_tmdb.add(TRENDING, json={"page": 1, "results": "not a list"})

    first = await tmdb_client.get_trending_movies()
    second = await tmdb_client.get_trending_movies()

    assert isinstance(first, Failure)
    assert first.error_type is ErrorType.MALFORMED_RESPONSE
    assert isinstance(second, Failure)
    assert len(fake_tmdb.requests_for(TRENDING)) == 2
    assert len(tmdb_client.cache) == 0


@pytest.mark.asyncio
async def test_non_json_body_is_malformed(
    tmdb_client: TMDBClient, fake_tmdb: FakeTMDB
) -> None:
    fake_tmdb.add(TRENDING, content=b"<html>maintenance</html>", headers={"Content-Type": "text/html"})

    result = await tmdb_client.get_trending_movies()

    assert isinstance(result, Failure)
    assert result.error_type is ErrorType.MALFORMED_RESPONSE
    assert "not valid JSON" in result.error.message


@pytest.mark.asyncio
async def test_missing_api_key_fails_without_request(
    settings: AppSettings, fake_tmdb: FakeTMDB
) -> None:
    unconfigured = settings.model_copy(update={"tmdb_api_key": None})
    http_client = fake_tmdb.http_client()

    async with TMDBClient(unconfigured, http_client=http_client) as client:
        result = await client.get_trending_movies()

    await http_client.aclose()
    assert isinstance(result, Failure)
    assert result.error_type is ErrorType.CONFIGURATION_ERROR
    assert fake_tmdb.requests == []


@pytest.mark.asyncio
@pytest.mark.parametrize("query", ["", "   "])
async def test_blank_search_is_rejected_locally(
    tmdb_client: TMDBClient, fake_tmdb: FakeTMDB, query: str
) -> None:
    result = await tmdb_client.search_movies(query)

    assert isinstance(result, Failure)
    assert result.error_type is ErrorType.VALIDATION_ERROR
    assert result.error.message == "Please enter a search query"
    assert fake_tmdb.requests == []


@pytest.mark.asyncio
async def test_search_strips_query_and_shares_cache(
    tmdb_client: TMDBClient, fake_tmdb: FakeTMDB
) -> None:
    fake_tmdb.add("/search/movie", json=list_payload(movie_payload(272, "Batman Begins")))

    await tmdb_client.search_movies("  batman ")
    await tmdb_client.search_movies("Batman")

    (request,) = fake_tmdb.requests_for("/search/movie")
    assert request.url.params["query"] == "batman"


@pytest.mark.asyncio
async def test_discover_sends_genre_and_sort(
    tmdb_client: TMDBClient, fake_tmdb: FakeTMDB
) -> None:
    fake_tmdb.add("/discover/movie", json=list_payload(movie_payload(157336, "Interstellar")))

    await tmdb_client.discover_movies(878, "vote_average.desc", page=2)
    await tmdb_client.discover_movies()

    with_genre, without_genre = fake_tmdb.requests_for("/discover/movie")
    assert with_genre.url.params["with_genres"] == "878"
    assert with_genre.url.params["sort_by"] == "vote_average.desc"
    assert with_genre.url.params["page"] == "2"
    assert "with_genres" not in without_genre.url.params
    assert without_genre.url.params["sort_by"] == "popularity.desc"


@pytest.mark.asyncio
async def test_discover_rejects_unknown_sort(tmdb_client: TMDBClient) -> None:
    with pytest.raises(ValueError):
        await tmdb_client.discover_movies(28, "budget.desc")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("category", "path"),
    [
        ("trending", "/trending/movie/week"),
        ("top-rated", "/movie/top_rated"),
        ("upcoming", "/movie/upcoming"),
        ("now-playing", "/movie/now_playing"),
    ],
)
async def test_get_movies_dispatches_by_category(
    tmdb_client: TMDBClient, fake_tmdb: FakeTMDB, category: str, path: str
) -> None:
    fake_tmdb.add(path, json=list_payload(movie_payload(1, "One")))

    result = await tmdb_client.get_movies(category)

    assert result.ok
    assert len(fake_tmdb.requests_for(path)) == 1


@pytest.mark.asyncio
async def test_get_movies_rejects_unknown_category(tmdb_client: TMDBClient) -> None:
    with pytest.raises(ValueError):
        await tmdb_client.get_movies("cult-classics")


@pytest.mark.asyncio
@pytest.mark.parametrize("page", [0, 501])
async def test_out_of_range_page_is_rejected(
    tmdb_client: TMDBClient, fake_tmdb: FakeTMDB, page: int
) -> None:
    result = await tmdb_client.get_top_rated_movies(page=page)

    assert isinstance(result, Failure)
    assert result.error_type is ErrorType.VALIDATION_ERROR
    assert fake_tmdb.requests == []


@pytest.mark.asyncio
async def test_unknown_trending_window_is_rejected(tmdb_client: TMDBClient) -> None:
    result = await tmdb_client.get_trending_movies(window="month")

    assert isinstance(result, Failure)
    assert result.error_type is ErrorType.VALIDATION_ERROR


@pytest.mark.asyncio
async def test_recommendations_use_movie_path(
    tmdb_client: TMDBClient, fake_tmdb: FakeTMDB
) -> None:
    fake_tmdb.add("/movie/27205/recommendations", json=list_payload(movie_payload(155, "The Dark Knight")))

    result = await tmdb_client.get_recommended_movies(27205)

    assert isinstance(result, Success)
    assert [movie.title for movie in result.value.results] == ["The Dark Knight"]


def test_image_urls(settings: AppSettings) -> None:
    client = TMDBClient(settings, RequestCache(60), http_client=httpx.AsyncClient())

    assert client.poster_url("/abc.jpg") == "https://image.tmdb.org/t/p/w500/abc.jpg"
    assert client.backdrop_url("/xyz.jpg") == "https://image.tmdb.org/t/p/original/xyz.jpg"
    assert client.poster_url("/abc.jpg", size="w185") == "https://image.tmdb.org/t/p/w185/abc.jpg"
    assert client.poster_url(None) is None
    assert client.backdrop_url("") is None


def test_build_image_url_rejects_unknown_size() -> None:
    with pytest.raises(ValueError):
        build_image_url("https://image.tmdb.org/t/p/", "/abc.jpg", "w9000")


@pytest.mark.asyncio
async def test_cached_response_cannot_be_mutated(
    tmdb_client: TMDBClient, fake_tmdb: FakeTMDB
) -> None:
    fake_tmdb.add(TRENDING, json=_trending_payload())

    first = await tmdb_client.get_trending_movies()
    assert isinstance(first, Success)
    with pytest.raises(ValidationError):
        first.value.results = ()
    with pytest.raises(AttributeError):
        first.value.results.append(first.value.results[0])  # type: ignore[attr-defined]

    second = await tmdb_client.get_trending_movies()
    assert [movie.id for movie in second.value.results] == [27205, 155]
