"""
pytest configuration and fixtures.
"""

from __future__ import annotations

from typing import Any, Generator

import pytest
from fastapi.testclient import TestClient

from core.db import QueryResult
from core.settings import Settings
from main import create_app


class FakeDatabase:
    """
    Stand-in for `core.db.Database`: records statements and replays queued outcomes.

    Queue a `QueryResult` (or an exception to raise) per expected statement.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.outcomes: list[QueryResult | Exception] = []
        self.connected = False
        self.connect_count = 0
        self.connect_error: Exception | None = None

    async def connect(self) -> None:
        self.connect_count += 1
        if self.connect_error is not None:
            raise self.connect_error
        self.connected = True

    async def close(self) -> None:
        self.connected = False

    def queue(self, *outcomes: QueryResult | Exception) -> None:
        self.outcomes.extend(outcomes)

    async def execute(self, sql: str, *args: Any) -> QueryResult:
        if not self.connected:
            await self.connect()
        self.calls.append((" ".join(sql.split()), args))
        outcome = self.outcomes.pop(0) if self.outcomes else QueryResult()
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        result = await self.execute(sql, *args)
        return result.rows


@pytest.fixture
def settings() -> Settings:
    return Settings(log_level="WARNING")


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def client(settings: Settings, fake_db: FakeDatabase) -> Generator[TestClient, None, None]:
    app = create_app(settings, database=fake_db)
    with TestClient(app) as test_client:
        yield test_client
