#!/usr/bin/env python3
"""Manually create the SQLite schema."""

import asyncio

from src.core.config import settings
from src.core.db_client import close_connection
from src.core.schema import init_db


async def main() -> None:
    await init_db()
    await close_connection()
    print(f"Schema ready at {settings.sqlite_db_path}")  # noqa: T201


if __name__ == "__main__":
    asyncio.run(main())
