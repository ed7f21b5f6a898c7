"""Centralized configuration management for the MovIQ client."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables defined in a local .env file before instantiating the
# settings singleton so that every consumer importing :mod:`moviq.settings` sees
# the same values regardless of entry point (CLI, tests, notebooks).
load_dotenv()

# -- Application-wide constants -------------------------------------------------

DEFAULT_TMDB_BASE_URL = "https://api.themoviedb.org/3"
DEFAULT_IMAGE_BASE_URL = "https://image.tmdb.org/t/p"
DEFAULT_LANGUAGE = "en-US"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 10.0
DEFAULT_CACHE_TTL_SECONDS = 300
DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_RETRY_INITIAL_DELAY_SECONDS = 1.0
DEFAULT_STORAGE_PATH = "./data/local_storage.json"
DEFAULT_LOG_LEVEL = "WARNING"


class AppSettings(BaseSettings):
    """Typed configuration surface built on top of ``pydantic-settings``.

    Every tunable used by the catalog client, the request cache, the retry
    wrapper and the favorites storage lives here so that the wiring in
    :mod:`moviq.services.dependencies` can build all collaborators from a
    single object.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    tmdb_api_key: str | None = Field(
        default=None,
        alias="TMDB_API_KEY",
        description="API key sent as the ``api_key`` query parameter on every request.",
    )
    tmdb_base_url: str = Field(
        default=DEFAULT_TMDB_BASE_URL,
        alias="TMDB_BASE_URL",
        description="Root URL of the TMDB v3 REST API.",
    )
    tmdb_language: str = Field(
        default=DEFAULT_LANGUAGE,
        alias="TMDB_LANGUAGE",
        description="Language parameter forwarded with every catalog request.",
    )
    image_base_url: str = Field(
        default=DEFAULT_IMAGE_BASE_URL,
        alias="TMDB_IMAGE_BASE_URL",
        description="CDN prefix used to build poster and backdrop URLs.",
    )
    request_timeout_seconds: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT_SECONDS,
        alias="REQUEST_TIMEOUT_SECONDS",
        gt=0,
        description="Per-request timeout applied to the shared HTTP client.",
    )
    cache_ttl_seconds: float = Field(
        default=DEFAULT_CACHE_TTL_SECONDS,
        alias="CACHE_TTL_SECONDS",
        gt=0,
        description="Lifetime of request cache entries.",
    )
    retry_attempts: int = Field(
        default=DEFAULT_RETRY_ATTEMPTS,
        alias="RETRY_ATTEMPTS",
        ge=0,
        description="Number of retries performed after the first failed attempt.",
    )
    retry_initial_delay_seconds: float = Field(
        default=DEFAULT_RETRY_INITIAL_DELAY_SECONDS,
        alias="RETRY_INITIAL_DELAY_SECONDS",
        ge=0,
        description="Delay before the first retry; doubled for each subsequent retry.",
    )
    storage_path: Path = Field(
        default=Path(DEFAULT_STORAGE_PATH),
        alias="MOVIQ_STORAGE_PATH",
        description="JSON file acting as durable local storage for favorites.",
    )
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        alias="LOG_LEVEL",
        description="Root logging level (e.g. INFO, DEBUG, WARNING).",
    )

    @property
    def log_level_numeric(self) -> int:
        """Translate ``log_level`` into the numeric constant expected by logging."""

        candidate = logging.getLevelName(self.log_level.upper())
        if isinstance(candidate, int):
            return candidate
        return logging.WARNING

    @property
    def has_api_key(self) -> bool:
        return bool(self.tmdb_api_key and self.tmdb_api_key.strip())

    def optional_config_warnings(self) -> list[str]:
        """Return human-readable warnings for unset configuration."""

        warnings: list[str] = []

        if not self.has_api_key:
            warnings.append(
                "TMDB_API_KEY is not set - catalog requests will fail until a key "
                "is provided (favorites remain available)"
            )

        return warnings


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return a cached instance of :class:`AppSettings`."""

    return AppSettings()


__all__ = [
    "AppSettings",
    "DEFAULT_CACHE_TTL_SECONDS",
    "DEFAULT_IMAGE_BASE_URL",
    "DEFAULT_LANGUAGE",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_REQUEST_TIMEOUT_SECONDS",
    "DEFAULT_RETRY_ATTEMPTS",
    "DEFAULT_RETRY_INITIAL_DELAY_SECONDS",
    "DEFAULT_STORAGE_PATH",
    "DEFAULT_TMDB_BASE_URL",
    "get_settings",
]
