"""
Orders API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from core.db import Database, get_db

from . import schemas, service

router = APIRouter()


@router.get("/orders", summary="Get all orders")
async def list_orders(db: Database = Depends(get_db)) -> list[dict]:
    return await service.list_orders(db)


@router.post("/orders", status_code=status.HTTP_201_CREATED, summary="Create a new order")
async def create_order(
    request: schemas.OrderCreate,
    db: Database = Depends(get_db),
) -> dict:
    return await service.create_order(db, request)


@router.patch("/orders/{order_id}", summary="Update order partially")
async def update_order(
    order_id: int,
    request: schemas.OrderPatch,
    db: Database = Depends(get_db),
) -> dict:
    """
    Only the supplied fields change. A body with neither `name` nor
    `quantity` is rejected with 400.
    """
    return await service.update_order(db, order_id, request)


@router.put("/orders/{order_id}", summary="Replace an order")
async def replace_order(
    order_id: int,
    request: schemas.OrderReplace,
    db: Database = Depends(get_db),
) -> dict:
    return await service.replace_order(db, order_id, request)


@router.delete("/orders/{order_id}", summary="Delete an order")
async def delete_order(
    order_id: int,
    db: Database = Depends(get_db),
) -> dict:
    return await service.delete_order(db, order_id)
