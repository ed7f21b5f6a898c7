"""Pytest configuration helpers for the MovIQ project.

The ``pytest`` plugin system automatically imports ``tests.conftest``. We use
that behavior to ensure the repository root is present on ``sys.path`` before
any test modules import application code, and to keep each test isolated from
a developer's ``.env`` and shell environment.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from tests import _ensure_repo_on_path

_MOVIQ_ENV_VARS = (
    "TMDB_API_KEY",
    "TMDB_BASE_URL",
    "TMDB_LANGUAGE",
    "TMDB_IMAGE_BASE_URL",
    "REQUEST_TIMEOUT_SECONDS",
    "CACHE_TTL_SECONDS",
    "RETRY_ATTEMPTS",
    "RETRY_INITIAL_DELAY_SECONDS",
    "MOVIQ_STORAGE_PATH",
    "LOG_LEVEL",
)


def pytest_configure(config: pytest.Config) -> None:
    """Hook executed by pytest prior to running any tests."""

    _ensure_repo_on_path()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Remove MovIQ variables so settings only reflect what a test sets."""

    for name in _MOVIQ_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
