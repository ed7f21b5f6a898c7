"""Pydantic schemas and result types for catalog data."""

from moviq.schemas.error import ErrorType, FetchError  # noqa: F401
from moviq.schemas.movie import (  # noqa: F401
    Genre,
    Movie,
    MovieDetails,
    MoviesResponse,
)
from moviq.schemas.result import Failure, FetchResult, Success  # noqa: F401
