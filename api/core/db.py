"""
Async database access helpers (raw SQL) using asyncpg.

`Database` owns the connection pool. FastAPI creates it on startup, keeps it
on `app.state.db` and closes it on shutdown (see `api/main.py`). Handlers
receive it through the `get_db` dependency and pass it down to repositories.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import asyncpg
from fastapi import Request

from . import config

logger = logging.getLogger(__name__)


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


class Database:
    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    @classmethod
    async def connect(cls) -> "Database":
        """
        Open the pool. Raises if the server cannot be reached; callers
        treat that as fatal.
        """
        pool = await asyncpg.create_pool(
            dsn=config.database_url(),
            min_size=config.pool_min_size(),
            max_size=config.pool_max_size(),
            max_inactive_connection_lifetime=config.pool_idle_timeout(),
            command_timeout=config.command_timeout(),
            ssl=config.database_ssl(),
        )
        logger.info(
            "db_pool_ready min_size=%s max_size=%s",
            config.pool_min_size(),
            config.pool_max_size(),
        )
        return cls(pool)

    async def close(self) -> None:
        await self._pool.close()

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        row = await self._pool.fetchrow(sql, *args)
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        rows = await self._pool.fetch(sql, *args)
        return [_record_to_dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any) -> None:
        """
        Run a statement (INSERT/UPDATE/DELETE/DDL). No result returned.
        """
        await self._pool.execute(sql, *args)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[asyncpg.Connection]:
        """
        Yield one pooled connection inside a transaction.

        The transaction commits when the block exits normally and rolls
        back on any exception.
        """
        async with self._pool.acquire() as conn:  # type: asyncpg.Connection
            async with conn.transaction():
                yield conn


def get_db(request: Request) -> Database:
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise RuntimeError("Database is not initialized. It is opened in the app lifespan.")
    return db
