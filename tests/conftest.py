"""Pytest configuration and shared fixtures."""

import logging
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from src.core import db_client
from src.core.config import settings
from src.core.schema import init_db


logger = logging.getLogger(__name__)


@pytest.fixture
def sqlite_db_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the application at a throwaway SQLite file."""
    db_path = tmp_path / "pantry_test.db"
    monkeypatch.setattr(settings, "sqlite_db_path", str(db_path))
    return db_path


@pytest.fixture
async def sqlite_db(sqlite_db_path: Path) -> AsyncGenerator[Path]:
    """Initialize the schema in a fresh SQLite file and close the connection afterwards."""
    await init_db()
    logger.debug("Test database initialized at %s", sqlite_db_path)
    yield sqlite_db_path
    await db_client.close_connection()
