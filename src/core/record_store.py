"""Record store adapter: a per-record keyed store queried by equality filters."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from src.core import db_client
from src.core.db_client import Filter


@dataclass(frozen=True)
class RecordRef:
    """Address of a single stored record."""

    collection: str
    id: str


@dataclass
class StoredRecord:
    """A record as returned by a query: its reference plus its fields."""

    ref: RecordRef
    fields: dict[str, Any] = field(default_factory=dict)

    @property
    def id(self) -> str:
        return self.ref.id


class RecordStore(Protocol):
    """Contract every backing store must satisfy.

    All operations are per-record; there is no multi-record transaction primitive.
    Implementations raise ``DatabaseError`` on store failures and
    ``RecordNotFoundError`` when a ref does not exist.
    """

    async def insert(self, collection: str, record: dict[str, Any]) -> str: ...

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter],
        *,
        sort: str = "",
        limit: int | None = None,
    ) -> list[StoredRecord]: ...

    async def update(self, ref: RecordRef, fields: dict[str, Any]) -> None: ...

    async def delete(self, ref: RecordRef) -> None: ...


def _to_stored_record(collection: str, record: dict[str, Any]) -> StoredRecord:
    fields = {key: value for key, value in record.items() if key != "id"}
    return StoredRecord(ref=RecordRef(collection=collection, id=str(record["id"])), fields=fields)


class SQLiteRecordStore:
    """RecordStore backed by the SQLite db_client module."""

    def __init__(self, *, page_size: int = 100) -> None:
        self.page_size = page_size

    async def insert(self, collection: str, record: dict[str, Any]) -> str:
        created = await db_client.create_record(collection=collection, data=record)
        return str(created["id"])

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter],
        *,
        sort: str = "",
        limit: int | None = None,
    ) -> list[StoredRecord]:
        if limit is not None:
            records = await db_client.list_records(collection=collection, filters=filters, sort=sort, per_page=limit)
            return [_to_stored_record(collection, record) for record in records]

        results: list[StoredRecord] = []
        page = 1
        while True:
            records = await db_client.list_records(
                collection=collection,
                filters=filters,
                sort=sort,
                page=page,
                per_page=self.page_size,
            )
            results.extend(_to_stored_record(collection, record) for record in records)

            if len(records) < self.page_size:
                return results
            page += 1

    async def update(self, ref: RecordRef, fields: dict[str, Any]) -> None:
        await db_client.update_record(collection=ref.collection, record_id=ref.id, data=fields)

    async def delete(self, ref: RecordRef) -> None:
        await db_client.delete_record(collection=ref.collection, record_id=ref.id)
