"""Pantry service for direct, owner-scoped inventory management."""

import logging

from src.core.config import constants
from src.core.db_client import RecordNotFoundError
from src.core.logging import span
from src.core.record_store import RecordStore, StoredRecord
from src.domain.pantry import InventoryItem, PantrySummary, normalize_amount, normalize_item_name


logger = logging.getLogger(__name__)

COLLECTION = constants.PANTRY_COLLECTION


def _to_item(record: StoredRecord) -> InventoryItem:
    return InventoryItem(id=record.id, **record.fields)


async def _get_owned_record(*, store: RecordStore, owner_id: str, item_id: str) -> StoredRecord:
    """Fetch a record by ID only if it belongs to ``owner_id``.

    Raises:
        RecordNotFoundError: If the item does not exist or belongs to someone else
    """
    records = await store.query(COLLECTION, [("id", "=", item_id), ("owner_id", "=", owner_id)])
    if not records:
        msg = f"Item not found: {item_id}"
        raise RecordNotFoundError(msg)
    return records[0]


async def list_items(*, store: RecordStore, owner_id: str, search: str = "") -> list[InventoryItem]:
    """Get a user's pantry items, sorted by name.

    Args:
        store: Record store to read from
        owner_id: ID of the owning user
        search: Optional case-insensitive substring filter on the item name

    Returns:
        List of pantry items
    """
    with span("pantry_service.list_items"):
        filters = [("owner_id", "=", owner_id)]
        if search.strip():
            filters.append(("name", "~", search.strip()))

        records = await store.query(COLLECTION, filters, sort="name")

        logger.debug(f"Retrieved {len(records)} pantry items")
        return [_to_item(record) for record in records]


async def add_item(*, store: RecordStore, owner_id: str, name: str, amount: float) -> InventoryItem:
    """Add a new item to a user's pantry.

    Items are always created as new records; an existing item with the same name is left untouched.

    Raises:
        ValueError: If the name is blank or the amount is negative
    """
    with span("pantry_service.add_item"):
        normalized = normalize_item_name(name)
        if not normalized:
            raise ValueError("Item name must not be empty")
        if amount < 0:
            raise ValueError("Item amount must not be negative")

        data = {"name": normalized, "amount": normalize_amount(amount), "owner_id": owner_id}
        item_id = await store.insert(COLLECTION, data)
        logger.info(f"Added pantry item: {normalized}", extra={"user_id": owner_id})

        return InventoryItem(id=item_id, **data)


async def increase_item(*, store: RecordStore, owner_id: str, item_id: str) -> InventoryItem:
    """Increase an item's amount by one.

    Raises:
        RecordNotFoundError: If the item does not exist or belongs to someone else
    """
    with span("pantry_service.increase_item"):
        record = await _get_owned_record(store=store, owner_id=owner_id, item_id=item_id)
        new_amount = normalize_amount(record.fields["amount"] + 1)
        await store.update(record.ref, {"amount": new_amount})

        logger.info(f"Increased pantry item: {record.fields['name']} -> {new_amount}")
        return InventoryItem(id=record.id, **{**record.fields, "amount": new_amount})


async def decrease_item(*, store: RecordStore, owner_id: str, item_id: str) -> InventoryItem | None:
    """Decrease an item's amount by one, removing it once the last unit is used.

    Returns:
        The updated item, or None if the item was removed

    Raises:
        RecordNotFoundError: If the item does not exist or belongs to someone else
    """
    with span("pantry_service.decrease_item"):
        record = await _get_owned_record(store=store, owner_id=owner_id, item_id=item_id)
        amount = record.fields["amount"]

        if amount <= 1:
            await store.delete(record.ref)
            logger.info(f"Removed pantry item after last unit: {record.fields['name']}")
            return None

        new_amount = normalize_amount(amount - 1)
        await store.update(record.ref, {"amount": new_amount})

        logger.info(f"Decreased pantry item: {record.fields['name']} -> {new_amount}")
        return InventoryItem(id=record.id, **{**record.fields, "amount": new_amount})


async def delete_item(*, store: RecordStore, owner_id: str, item_id: str) -> bool:
    """Delete one of a user's items.

    Returns:
        True if the item was removed, False if not found
    """
    with span("pantry_service.delete_item"):
        try:
            record = await _get_owned_record(store=store, owner_id=owner_id, item_id=item_id)
        except RecordNotFoundError:
            return False

        await store.delete(record.ref)
        logger.info(f"Deleted pantry item: {record.fields['name']}", extra={"user_id": owner_id})
        return True


async def get_top_items(
    *, store: RecordStore, owner_id: str, limit: int = constants.TOP_ITEMS_LIMIT
) -> list[InventoryItem]:
    """Get a user's items with the largest amounts, largest first."""
    with span("pantry_service.get_top_items"):
        records = await store.query(COLLECTION, [("owner_id", "=", owner_id)], sort="-amount", limit=limit)
        return [_to_item(record) for record in records]


async def get_summary(*, store: RecordStore, owner_id: str) -> PantrySummary:
    """Get the total amount and per-item chart data for a user's pantry."""
    with span("pantry_service.get_summary"):
        records = await store.query(COLLECTION, [("owner_id", "=", owner_id)])
        labels = [record.fields["name"] for record in records]
        amounts = [record.fields["amount"] for record in records]

        return PantrySummary(total=sum(amounts), labels=labels, amounts=amounts)
