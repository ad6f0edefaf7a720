#!/usr/bin/env python3
"""
Create the review blog tables from the model metadata.

Existing tables are left untouched.

Usage:
    uv run python scripts/init_db.py
"""

import asyncio

from app.config import settings
from app.core.database import Database


async def main() -> None:
    database = Database.from_settings(settings)
    try:
        await database.create_all()
        print("✓ Tables created")
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(main())
