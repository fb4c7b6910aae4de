"""Pytest configuration and fixtures for integration tests."""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from src.interface.dependencies import get_completion_provider, get_record_store
from src.main import app
from tests.unit.mocks import FakeCompletionProvider, InMemoryRecordStore


@pytest.fixture
def api_store() -> InMemoryRecordStore:
    """Record store shared by every request of one test."""
    return InMemoryRecordStore()


@pytest.fixture
def fake_provider() -> FakeCompletionProvider:
    """Completion provider whose completions each test queues up."""
    return FakeCompletionProvider()


@pytest.fixture
def client(api_store: InMemoryRecordStore, fake_provider: FakeCompletionProvider) -> Generator[TestClient]:
    """Test client with the store and completion provider swapped for fakes.

    The lifespan is not entered, so no credentials or database file are needed.
    """
    app.dependency_overrides[get_record_store] = lambda: api_store
    app.dependency_overrides[get_completion_provider] = lambda: fake_provider
    yield TestClient(app)
    app.dependency_overrides.clear()
