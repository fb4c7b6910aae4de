"""Integration tests for the SQLite-backed record store."""

import pytest

from src.core import db_client
from src.core.db_client import DatabaseError, RecordNotFoundError
from src.core.record_store import RecordRef, SQLiteRecordStore
from src.core.errors import ErrorCode
from src.domain.task import Task, TaskAction
from src.interpreter import TaskExecutor
from src.services import recipe_service


PANTRY = "pantry_items"


@pytest.fixture
def store(sqlite_db) -> SQLiteRecordStore:
    """Record store over a fresh SQLite database."""
    return SQLiteRecordStore(page_size=2)


@pytest.mark.integration
class TestSQLiteRecordStore:
    """Tests for SQLiteRecordStore against a real database file."""

    async def test_insert_and_query(self, store):
        """Test an inserted record can be found by equality filters."""
        record_id = await store.insert(PANTRY, {"name": "rice", "amount": 2, "owner_id": "user_1"})

        records = await store.query(PANTRY, [("name", "=", "rice"), ("owner_id", "=", "user_1")])

        assert len(records) == 1
        assert records[0].id == record_id
        assert records[0].fields["amount"] == 2
        assert records[0].fields["owner_id"] == "user_1"

    async def test_query_pages_through_all_results(self, store):
        """Test results spanning several pages are all returned."""
        for name in ["a", "b", "c", "d", "e"]:
            await store.insert(PANTRY, {"name": name, "amount": 1, "owner_id": "user_1"})

        records = await store.query(PANTRY, [("owner_id", "=", "user_1")], sort="name")

        assert [r.fields["name"] for r in records] == ["a", "b", "c", "d", "e"]

    async def test_query_with_limit_and_descending_sort(self, store):
        """Test a limited query returns the top records."""
        for name, amount in [("rice", 2), ("beans", 9), ("milk", 5)]:
            await store.insert(PANTRY, {"name": name, "amount": amount, "owner_id": "user_1"})

        records = await store.query(PANTRY, [("owner_id", "=", "user_1")], sort="-amount", limit=2)

        assert [r.fields["name"] for r in records] == ["beans", "milk"]

    async def test_substring_filter_is_case_insensitive(self, store):
        """Test the ~ operator matches substrings regardless of case."""
        await store.insert(PANTRY, {"name": "brown rice", "amount": 1, "owner_id": "user_1"})
        await store.insert(PANTRY, {"name": "beans", "amount": 1, "owner_id": "user_1"})

        records = await store.query(PANTRY, [("name", "~", "RICE")])

        assert [r.fields["name"] for r in records] == ["brown rice"]

    async def test_substring_filter_escapes_wildcards(self, store):
        """Test LIKE wildcards in the search term are matched literally."""
        await store.insert(PANTRY, {"name": "rice", "amount": 1, "owner_id": "user_1"})

        assert await store.query(PANTRY, [("name", "~", "%")]) == []

    async def test_update_and_delete(self, store):
        """Test fields can be updated and records deleted by ref."""
        record_id = await store.insert(PANTRY, {"name": "rice", "amount": 2, "owner_id": "user_1"})
        ref = RecordRef(collection=PANTRY, id=record_id)

        await store.update(ref, {"amount": 7})
        record = await db_client.get_record(collection=PANTRY, record_id=record_id)
        assert record["amount"] == 7

        await store.delete(ref)
        assert await store.query(PANTRY, [("name", "=", "rice")]) == []

    async def test_missing_ref_raises(self, store):
        """Test updating or deleting a missing record raises RecordNotFoundError."""
        ref = RecordRef(collection=PANTRY, id="999")

        with pytest.raises(RecordNotFoundError):
            await store.update(ref, {"amount": 1})
        with pytest.raises(RecordNotFoundError):
            await store.delete(ref)

    async def test_negative_amount_violates_constraint(self, store):
        """Test the schema rejects negative amounts."""
        with pytest.raises(DatabaseError):
            await store.insert(PANTRY, {"name": "rice", "amount": -1, "owner_id": "user_1"})

    async def test_integer_out_of_sqlite_range_raises_database_error(self, store):
        """Test integers SQLite cannot bind surface as DatabaseError."""
        with pytest.raises(DatabaseError):
            await store.insert(PANTRY, {"name": "rice", "amount": 10**20, "owner_id": "user_1"})

    async def test_unknown_operator_rejected(self, store):
        """Test unsupported filter operators are refused."""
        with pytest.raises(ValueError, match="Unsupported operator"):
            await store.query(PANTRY, [("name", "LIKE", "rice")])

    async def test_invalid_field_name_rejected(self, store):
        """Test field names are validated before reaching SQL."""
        with pytest.raises(ValueError, match="Invalid field name"):
            await store.query(PANTRY, [("name; DROP TABLE pantry_items", "=", "rice")])


@pytest.mark.integration
class TestExecutorAgainstSQLite:
    """End-to-end task execution against a real database file."""

    async def test_add_update_delete_cycle(self, store):
        """Test a task sequence is applied to the database."""
        executor = TaskExecutor(store)
        owner = "user_1"

        outcomes = await executor.execute_batch(
            [
                Task(action=TaskAction.ADD, item_name="Rice", item_count=2),
                Task(action=TaskAction.ADD, item_name="rice", item_count=1),
                Task(action=TaskAction.UPDATE, item_name="RICE", item_count=4),
            ],
            owner,
        )

        assert [o.success for o in outcomes] == [True, True, True]
        records = await store.query(PANTRY, [("owner_id", "=", owner)])
        assert [r.fields["amount"] for r in records] == [4, 4]

        outcome = await executor.execute(Task(action=TaskAction.DELETE, item_name="rice"), owner)

        assert outcome.success is True
        assert await store.query(PANTRY, [("owner_id", "=", owner)]) == []

    async def test_oversized_counts_become_store_failures(self, store):
        """Test counts SQLite cannot store fail the task instead of raising."""
        executor = TaskExecutor(store)
        await store.insert(PANTRY, {"name": "flour", "amount": 1, "owner_id": "user_1"})

        added = await executor.execute(Task(action=TaskAction.ADD, item_name="rice", item_count=10**20), "user_1")
        updated = await executor.execute(
            Task(action=TaskAction.UPDATE, item_name="flour", item_count=10**20), "user_1"
        )

        assert added.success is False
        assert added.error_code == ErrorCode.ERR_STORE_FAILURE
        assert updated.success is False
        assert updated.error_code == ErrorCode.ERR_STORE_FAILURE
        records = await store.query(PANTRY, [("owner_id", "=", "user_1")])
        assert [(r.fields["name"], r.fields["amount"]) for r in records] == [("flour", 1)]


@pytest.mark.integration
class TestRecipesAgainstSQLite:
    """Recipe generation against a real database file."""

    async def test_created_timestamp_matches_stored_row(self, store):
        """Test the returned recipe carries the timestamp that was stored."""
        recipe = await recipe_service.generate_recipe(store=store, owner_id="user_1", ingredients=["rice"])

        listed = await recipe_service.list_recipes(store=store, owner_id="user_1")

        assert listed[0].id == recipe.id
        assert listed[0].created == recipe.created
