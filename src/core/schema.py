"""SQLite schema management (code-first approach)."""

import logging

from src.core.db_client import get_connection


logger = logging.getLogger(__name__)


# Central list of all collections in the schema
COLLECTIONS = [
    "pantry_items",
    "recipes",
]

TABLE_SCHEMAS: dict[str, str] = {
    "pantry_items": """CREATE TABLE IF NOT EXISTS pantry_items (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        created TEXT NOT NULL DEFAULT (datetime('now')),
        updated TEXT NOT NULL DEFAULT (datetime('now')),
        name TEXT NOT NULL,
        amount NUMERIC NOT NULL CHECK (amount >= 0),
        owner_id TEXT NOT NULL
    )""",
    "recipes": """CREATE TABLE IF NOT EXISTS recipes (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        created TEXT NOT NULL DEFAULT (datetime('now')),
        updated TEXT NOT NULL DEFAULT (datetime('now')),
        title TEXT NOT NULL,
        minutes_takes INTEGER NOT NULL,
        steps TEXT NOT NULL,
        ingredients TEXT NOT NULL,
        owner_id TEXT NOT NULL
    )""",
}

INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_pantry_items_owner_name ON pantry_items (owner_id, name)",
    "CREATE INDEX IF NOT EXISTS idx_recipes_owner ON recipes (owner_id)",
]


async def init_db(*, db_path: str | None = None) -> None:
    """Create all tables and indexes if they do not exist yet."""
    conn = await get_connection(db_path=db_path)

    for collection in COLLECTIONS:
        await conn.execute(TABLE_SCHEMAS[collection])

    for index in INDEXES:
        await conn.execute(index)

    await conn.commit()
    logger.info("Schema initialized", extra={"collections": COLLECTIONS})
