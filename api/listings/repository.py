"""
Listings persistence. Rows are returned as-is; no shape is imposed.
"""

from __future__ import annotations

from typing import Any

from core.db import Database


async def list_students(db: Database) -> list[dict[str, Any]]:
    return await db.fetch_all("SELECT * FROM student")


async def list_foods(db: Database) -> list[dict[str, Any]]:
    return await db.fetch_all("SELECT * FROM foods")
