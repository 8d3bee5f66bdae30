"""
Orders business logic: shape repository results into API responses.
"""

from __future__ import annotations

import logging

from core.db import Database
from core.errors import InputValidationError

from . import repository, schemas

logger = logging.getLogger(__name__)


def _affected(msg: str, affected_rows: int) -> dict:
    return {"msg": msg, "affectedRows": affected_rows}


async def list_orders(db: Database) -> list[dict]:
    return await repository.list_orders(db)


async def create_order(db: Database, payload: schemas.OrderCreate) -> dict:
    order_id = await repository.insert_order(db, name=payload.name, quantity=payload.quantity)
    logger.info("order_created id=%s", order_id)
    return {"id": order_id, "name": payload.name, "quantity": payload.quantity}


async def update_order(db: Database, order_id: int, payload: schemas.OrderPatch) -> dict:
    changes = payload.changes()
    if not changes:
        # An empty SET clause is never sent to the database.
        raise InputValidationError(
            [{"field": "body", "message": "No fields to update.", "location": "body"}]
        )

    affected_rows = await repository.update_order_fields(db, order_id, changes)
    logger.info("order_updated id=%s fields=%s affected=%s", order_id, sorted(changes), affected_rows)
    return _affected("Order updated", affected_rows)


async def replace_order(db: Database, order_id: int, payload: schemas.OrderReplace) -> dict:
    affected_rows = await repository.replace_order(
        db,
        order_id,
        name=payload.name,
        quantity=payload.quantity,
    )
    logger.info("order_replaced id=%s affected=%s", order_id, affected_rows)
    return _affected("Order replaced", affected_rows)


async def delete_order(db: Database, order_id: int) -> dict:
    affected_rows = await repository.delete_order(db, order_id)
    logger.info("order_deleted id=%s affected=%s", order_id, affected_rows)
    return _affected("Order deleted", affected_rows)
