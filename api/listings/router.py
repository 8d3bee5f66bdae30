"""
Listing API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from core.db import Database, get_db

from . import repository

router = APIRouter()


@router.get("/student", summary="Get all students")
async def list_students(db: Database = Depends(get_db)) -> list[dict]:
    return await repository.list_students(db)


@router.get("/foods", summary="Get all foods")
async def list_foods(db: Database = Depends(get_db)) -> list[dict]:
    return await repository.list_foods(db)
