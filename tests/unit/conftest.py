"""Pytest configuration and fixtures for unit tests."""

from unittest.mock import AsyncMock, patch

import pytest

from src.agents.retry_handler import RetryPolicy
from src.interpreter import TaskExecutor
from tests.unit.mocks import InMemoryRecordStore


OWNER_ID = "user_1"


@pytest.fixture
def in_memory_store() -> InMemoryRecordStore:
    """Provides a fresh InMemoryRecordStore for each test."""
    return InMemoryRecordStore()


@pytest.fixture
def mock_sleep():
    """Patch the retry delay so retried lookups finish instantly."""
    with patch("src.agents.retry_handler.asyncio.sleep", new_callable=AsyncMock) as sleep:
        yield sleep


@pytest.fixture
def executor(in_memory_store: InMemoryRecordStore, mock_sleep: AsyncMock) -> TaskExecutor:
    """Task executor over the in-memory store with the default retry policy."""
    return TaskExecutor(in_memory_store, RetryPolicy(max_attempts=3, delay=0.2))


@pytest.fixture
def seed_item(in_memory_store: InMemoryRecordStore):
    """Factory inserting a pantry item for an owner."""

    def _seed(name: str, amount: float, owner_id: str = OWNER_ID) -> str:
        return in_memory_store.seed("pantry_items", {"name": name, "amount": amount, "owner_id": owner_id})

    return _seed
