"""Shared fixtures for MovIQ tests."""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio

from moviq import retry
from moviq.cache import RequestCache
from moviq.clients.tmdb import TMDBClient
from moviq.settings import AppSettings
from tests.moviq.support.tmdb_fakes import TEST_BASE_URL, FakeClock, FakeTMDB


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    """Settings with an API key, instant retries and storage under ``tmp_path``."""

    return AppSettings(
        tmdb_api_key="test-key",
        tmdb_base_url=TEST_BASE_URL,
        tmdb_language="en-US",
        retry_attempts=3,
        retry_initial_delay_seconds=1.0,
        storage_path=tmp_path / "storage.json",
    )


@pytest.fixture
def fake_tmdb() -> FakeTMDB:
    return FakeTMDB()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Record retry delays instead of waiting for them."""

    recorded: list[float] = []

    async def _fake_sleep(delay: float) -> None:
        recorded.append(delay)

    monkeypatch.setattr(retry.asyncio, "sleep", _fake_sleep)
    return recorded


@pytest_asyncio.fixture
async def tmdb_client(
    settings: AppSettings,
    fake_tmdb: FakeTMDB,
    clock: FakeClock,
    sleeps: list[float],
) -> AsyncIterator[TMDBClient]:
    http_client = fake_tmdb.http_client()
    client = TMDBClient(
        settings,
        RequestCache(settings.cache_ttl_seconds, clock=clock),
        http_client=http_client,
    )
    yield client
    await client.aclose()
    await http_client.aclose()
