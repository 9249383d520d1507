"""Pooled, read-only access to the relational store.

`Database` wraps one SQLAlchemy async engine. It is built once at startup,
handed to the route handlers through `app.state`, and disposed at shutdown.

`fetch_all` never raises for store-side problems: it returns either `Rows` or
`QueryFailure`, and the caller decides what that means for the HTTP response.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Union

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool

from .config import Settings


@dataclass(frozen=True)
class Rows:
    rows: list[dict[str, Any]]


@dataclass(frozen=True)
class QueryFailure:
    error: BaseException


QueryResult = Union[Rows, QueryFailure]

# Everything the driver, the pool or the timeout can throw at us.
STORE_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError)


def connect_args(settings: Settings) -> dict[str, Any]:
    # asyncpg waits 60s on an unreachable host by default.
    if make_url(settings.database_url).get_driver_name() == "asyncpg":
        return {"timeout": settings.db_connect_timeout}
    return {}


def build_engine(settings: Settings) -> AsyncEngine:
    return create_async_engine(
        settings.database_url,
        echo=False,
        poolclass=AsyncAdaptedQueuePool,
        pool_size=settings.db_pool_size,
        max_overflow=0,
        pool_timeout=settings.db_pool_timeout,
        pool_pre_ping=True,
        connect_args=connect_args(settings),
    )


class Database:
    def __init__(self, engine: AsyncEngine, query_timeout: float = 10.0) -> None:
        self.engine = engine
        self.query_timeout = query_timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> Database:
        return cls(build_engine(settings), query_timeout=settings.db_query_timeout)

    async def _query(self, conn: AsyncConnection, sql: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        result = await conn.execute(text(sql), params)
        return [dict(row) for row in result.mappings()]

    async def _execute(self, sql: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        # The connection goes back to the pool when the block exits, on error too.
        async with self.engine.connect() as conn:
            return await asyncio.wait_for(self._query(conn, sql, params), timeout=self.query_timeout)

    async def fetch_all(self, sql: str, params: dict[str, Any] | None = None) -> QueryResult:
        """Run one parameterized read query.

        Waiting for a pooled connection is bounded by the pool timeout, opening
        one by the driver's connect timeout, and the statement itself by
        `query_timeout`.
        """
        try:
            rows = await self._execute(sql, params or {})
        except STORE_ERRORS as exc:
            return QueryFailure(error=exc)
        return Rows(rows=rows)

    async def close(self) -> None:
        await self.engine.dispose()
