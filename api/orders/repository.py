"""
Orders persistence.
This module is where orders-related SQL lives.
"""

from __future__ import annotations

from typing import Any

from core.db import Database
from core.errors import QueryError

# Columns a partial update may touch, in SET-clause order.
UPDATABLE_COLUMNS = ("name", "quantity")


async def list_orders(db: Database) -> list[dict[str, Any]]:
    return await db.fetch_all("SELECT * FROM orders ORDER BY id")


async def insert_order(db: Database, *, name: str, quantity: int) -> int:
    result = await db.execute(
        """
        INSERT INTO orders (name, quantity)
        VALUES ($1, $2)
        RETURNING id
        """,
        name,
        quantity,
    )
    if result.insert_id is None:
        raise QueryError("Failed to insert order.")
    return result.insert_id


async def replace_order(db: Database, order_id: int, *, name: str, quantity: int) -> int:
    result = await db.execute(
        """
        UPDATE orders
        SET name = $1, quantity = $2
        WHERE id = $3
        """,
        name,
        quantity,
        order_id,
    )
    return result.affected_rows


def build_partial_update(order_id: int, changes: dict[str, Any]) -> tuple[str, list[Any]]:
    """
    Build `UPDATE orders SET ... WHERE id = $n` for the supplied columns only.

    Column names come from UPDATABLE_COLUMNS, never from the request; values
    are always bound as parameters.
    """
    unknown = set(changes) - set(UPDATABLE_COLUMNS)
    if unknown:
        raise ValueError(f"Cannot update columns: {sorted(unknown)}")

    assignments: list[str] = []
    values: list[Any] = []
    for column in UPDATABLE_COLUMNS:
        if column in changes:
            values.append(changes[column])
            assignments.append(f"{column} = ${len(values)}")

    if not assignments:
        raise ValueError("No columns to update.")

    values.append(order_id)
    sql = f"UPDATE orders SET {', '.join(assignments)} WHERE id = ${len(values)}"
    return sql, values


async def update_order_fields(db: Database, order_id: int, changes: dict[str, Any]) -> int:
    sql, values = build_partial_update(order_id, changes)
    result = await db.execute(sql, *values)
    return result.affected_rows


async def delete_order(db: Database, order_id: int) -> int:
    result = await db.execute(
        """
        DELETE FROM orders
        WHERE id = $1
        """,
        order_id,
    )
    return result.affected_rows
