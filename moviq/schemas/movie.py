"""Pydantic schemas describing catalog payloads.

The TMDB API is loosely typed: optional strings arrive as ``null`` or ``""``
depending on the endpoint, and dates are serialised as ``YYYY-MM-DD`` strings
that can be empty for unreleased titles. The validators below normalise those
variations once, at the boundary, so that the rest of the package can rely on
``None`` meaning "absent".
"""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class Genre(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class Movie(BaseModel):
    """Summary record returned by list, search and recommendation endpoints."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int = Field(..., description="TMDB movie identifier")
    title: str
    overview: str = ""
    poster_path: str | None = None
    backdrop_path: str | None = None
    release_date: date | None = None
    vote_average: float = Field(0.0, ge=0, le=10)
    vote_count: int = Field(0, ge=0)
    genre_ids: tuple[int, ...] = ()
    popularity: float = 0.0

    @field_validator("poster_path", "backdrop_path", "release_date", mode="before")
    @classmethod
    def _normalize_blank(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("overview", mode="before")
    @classmethod
    def _null_overview(cls, value: Any) -> Any:
        return "" if value is None else value


class MovieDetails(Movie):
    """Full record returned by ``/movie/{id}``."""

    genres: tuple[Genre, ...] = ()
    runtime: int | None = Field(None, ge=0, description="Runtime in minutes")
    status: str = ""
    tagline: str = ""
    budget: int = Field(0, ge=0)
    revenue: int = Field(0, ge=0)
    homepage: str | None = None

    @field_validator("homepage", mode="before")
    @classmethod
    def _blank_homepage(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("status", "tagline", mode="before")
    @classmethod
    def _null_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @model_validator(mode="before")
    @classmethod
    def _derive_genre_ids(cls, data: Any) -> Any:
        # The detail endpoint returns ``genres`` objects instead of ``genre_ids``.
        if isinstance(data, dict) and not data.get("genre_ids") and data.get("genres"):
            genre_ids = [
                genre["id"]
                for genre in data["genres"]
                if isinstance(genre, dict) and "id" in genre
            ]
            data = {**data, "genre_ids": genre_ids}
        return data

    def as_movie(self) -> Movie:
        """Project the detail record onto the summary shape stored in favorites."""

        return Movie.model_validate(
            self.model_dump(include=set(Movie.model_fields))
        )


class MoviesResponse(BaseModel):
    """Paginated list envelope shared by every list endpoint."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    page: int = Field(1, ge=0)
    results: tuple[Movie, ...] = ()
    total_pages: int = Field(0, ge=0)
    total_results: int = Field(0, ge=0)

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages


__all__ = ["Genre", "Movie", "MovieDetails", "MoviesResponse"]
