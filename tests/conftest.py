# tests/conftest.py

"""Shared pytest fixtures for the catalog tests."""

from collections.abc import Generator
from pathlib import Path

import pytest

from catalog.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_paths(tmp_path: Path) -> Generator[None, None, None]:
    """Point the cache database and log directory at a temp dir."""
    original_db = Settings.CACHE_DB_PATH
    original_logs = Settings.LOGS_DIR
    Settings.CACHE_DB_PATH = tmp_path / "data" / "products_cache.db"
    Settings.LOGS_DIR = tmp_path / "logs"
    yield
    Settings.CACHE_DB_PATH = original_db
    Settings.LOGS_DIR = original_logs
