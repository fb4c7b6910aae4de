"""Tests for the in-memory record store used by unit tests."""

import pytest

from src.core.db_client import DatabaseError, RecordNotFoundError
from src.core.record_store import RecordRef
from tests.unit.mocks import InMemoryRecordStore


@pytest.mark.unit
class TestInMemoryRecordStore:
    """Tests that the fake honours the RecordStore contract."""

    async def test_insert_query_update_delete(self, in_memory_store: InMemoryRecordStore):
        """Test the basic record lifecycle."""
        record_id = await in_memory_store.insert("pantry_items", {"name": "rice", "amount": 1, "owner_id": "u"})
        ref = RecordRef(collection="pantry_items", id=record_id)

        await in_memory_store.update(ref, {"amount": 4})
        records = await in_memory_store.query("pantry_items", [("name", "=", "rice")])
        assert records[0].fields["amount"] == 4

        await in_memory_store.delete(ref)
        assert await in_memory_store.query("pantry_items", []) == []

    async def test_hidden_inserts_appear_later(self, in_memory_store: InMemoryRecordStore):
        """Test simulated visibility lag hides new records from the next query."""
        in_memory_store.hide_inserts_for = 1
        await in_memory_store.insert("pantry_items", {"name": "rice", "amount": 1, "owner_id": "u"})

        assert await in_memory_store.query("pantry_items", []) == []
        assert len(await in_memory_store.query("pantry_items", [])) == 1

    async def test_injected_failure(self, in_memory_store: InMemoryRecordStore):
        """Test a queued failure raises once."""
        in_memory_store.fail_next["query"] = 1

        with pytest.raises(DatabaseError):
            await in_memory_store.query("pantry_items", [])
        assert await in_memory_store.query("pantry_items", []) == []

    async def test_missing_ref(self, in_memory_store: InMemoryRecordStore):
        """Test a missing ref raises RecordNotFoundError."""
        with pytest.raises(RecordNotFoundError):
            await in_memory_store.delete(RecordRef(collection="pantry_items", id="1"))
