"""
Async database access (raw SQL) using asyncpg.

`Database` owns the connection pool. The app factory builds one instance,
stores it on `app.state.db`, opens it on startup (or on first use when the
database is unreachable at boot) and closes it on shutdown (see
`api/main.py`). Route handlers receive it through `get_db`.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import asyncio
import logging
import re
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator

import asyncpg
from fastapi import Request

from .errors import DatabaseConnectionError, QueryError
from .settings import Settings

logger = logging.getLogger(__name__)

# Raised by asyncpg/asyncio when no connection can be produced.
_CONNECT_ERRORS = (
    OSError,
    asyncio.TimeoutError,
    asyncpg.InterfaceError,
    asyncpg.PostgresConnectionError,
    asyncpg.TooManyConnectionsError,
)

_ROW_VERBS = {"SELECT", "WITH", "VALUES", "SHOW"}
_RETURNING = re.compile(r"\bRETURNING\b", re.IGNORECASE)


@dataclass(frozen=True)
class QueryResult:
    rows: list[dict[str, Any]] = field(default_factory=list)
    insert_id: int | None = None
    affected_rows: int = 0


def _verb(sql: str) -> str:
    stripped = sql.lstrip().lstrip("(")
    return stripped.split(None, 1)[0].upper() if stripped else ""


def _returns_rows(sql: str) -> bool:
    return _verb(sql) in _ROW_VERBS or _RETURNING.search(sql) is not None


def _affected_rows(status: str | None) -> int:
    """
    Parse the row count from a command tag: "UPDATE 3", "DELETE 0", "INSERT 0 1".
    """
    if not status:
        return 0
    last = status.rsplit(" ", 1)[-1]
    return int(last) if last.isdigit() else 0


class Database:
    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._pool: asyncpg.Pool | None = None
        self._connect_lock = asyncio.Lock()

    @property
    def settings(self) -> Settings:
        return self._settings

    async def connect(self) -> None:
        async with self._connect_lock:
            if self._pool is not None:
                return None
            try:
                self._pool = await asyncpg.create_pool(
                    **self._settings.connect_kwargs(),
                    min_size=self._settings.pool_min_size,
                    max_size=self._settings.pool_size,
                    command_timeout=self._settings.command_timeout,
                )
            except _CONNECT_ERRORS as exc:
                raise DatabaseConnectionError(f"Could not open database pool: {exc}") from exc
        logger.info(
            "db_pool_opened min_size=%s max_size=%s",
            self._settings.pool_min_size,
            self._settings.pool_size,
        )

    async def close(self) -> None:
        if self._pool is None:
            return None
        await self._pool.close()
        self._pool = None
        logger.info("db_pool_closed")

    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("DB pool is not initialized. Call connect() first.")
        return self._pool

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        """
        Borrow a connection; it goes back to the pool on every exit path.

        Opens the pool first if startup could not reach the database.
        """
        if self._pool is None:
            await self.connect()
        pool = self.pool()
        try:
            conn = await pool.acquire(timeout=self._settings.acquire_timeout)
        except _CONNECT_ERRORS as exc:
            raise DatabaseConnectionError(str(exc) or "Timed out waiting for a database connection.") from exc
        try:
            yield conn
        finally:
            await pool.release(conn)

    async def execute(self, sql: str, *args: Any) -> QueryResult:
        """
        Run exactly one parameterized statement.

        - SELECT (or anything with RETURNING) -> `rows`
        - INSERT ... RETURNING id -> `insert_id`
        - UPDATE / DELETE -> `affected_rows`
        """
        async with self.acquire() as conn:
            try:
                if _returns_rows(sql):
                    records = await conn.fetch(sql, *args)
                    rows = [dict(r) for r in records]
                    insert_id = None
                    if _verb(sql) == "INSERT" and rows and "id" in rows[0]:
                        insert_id = int(rows[0]["id"])
                    return QueryResult(rows=rows, insert_id=insert_id, affected_rows=len(rows))

                status = await conn.execute(sql, *args)
                return QueryResult(affected_rows=_affected_rows(status))
            except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as exc:
                raise QueryError(str(exc) or "Statement timed out.") from exc

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        result = await self.execute(sql, *args)
        return result.rows


def get_db(request: Request) -> Database:
    """
    FastAPI dependency: the app-wide `Database` created by the app factory.
    """
    return request.app.state.db
