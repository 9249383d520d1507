from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import insert

from labcatalog.config import Settings
from labcatalog.db import Database, Rows
from labcatalog.main import create_app

from .schema import Base, Category, LabTest

# Inserted out of position order so the ORDER BY is what sorts them.
CATEGORIES = [
    {"id": 2, "category_name": "Hematology", "position": 2},
    {"id": 1, "category_name": "Chemistry", "position": 1},
]

LAB_TESTS = [
    {"id": 11, "category_id": 1, "name": "Lipid Panel", "position": 2},
    {"id": 20, "category_id": 2, "name": "Complete Blood Count", "position": 1},
    {"id": 10, "category_id": 1, "name": "Glucose", "position": 1},
]


class StubDatabase:
    """Records every query and answers with a canned result."""

    def __init__(self, result=None):
        self.result = result if result is not None else Rows(rows=[])
        self.calls: list[tuple[str, dict | None]] = []

    async def fetch_all(self, sql, params=None):
        self.calls.append((sql, params))
        return self.result


class UntouchableDatabase:
    async def fetch_all(self, sql, params=None):
        pytest.fail(f"unexpected query: {sql!r} {params!r}")


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'labcatalog.db'}",
        db_pool_size=2,
        db_query_timeout=5.0,
    )


@pytest_asyncio.fixture
async def database(settings):
    db = Database.from_settings(settings)
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.execute(insert(Category), CATEGORIES)
        await conn.execute(insert(LabTest), LAB_TESTS)
    yield db
    await db.close()


def make_client(settings: Settings, database) -> AsyncClient:
    app = create_app(settings=settings, database=database)
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest_asyncio.fixture
async def client(settings, database):
    async with make_client(settings, database) as ac:
        yield ac
