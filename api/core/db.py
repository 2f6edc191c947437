"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. The app lifespan initializes it on
startup and closes it on shutdown (see `api/main.py`).

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

Every driver or connection failure is re-raised as `StoreError`, so callers
only need to handle one exception type.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from .config import Settings

_pool: asyncpg.Pool | None = None

_DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


class StoreError(RuntimeError):
    pass


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url(settings: Settings) -> str:
    url = (settings.database_url or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


async def init_pool(settings: Settings) -> None:
    global _pool
    if _pool is not None:
        return None
    _pool = await asyncpg.create_pool(
        dsn=database_url(settings),
        min_size=min(settings.db_pool_min_size, settings.db_pool_max_size),
        max_size=settings.db_pool_max_size,
        command_timeout=settings.db_command_timeout_s,
    )


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise StoreError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


def rows_affected(status: str) -> int:
    """
    Parse the row count out of a command status tag.

    "UPDATE 1" -> 1, "DELETE 0" -> 0, "INSERT 0 3" -> 3.
    """
    parts = (status or "").split()
    if not parts:
        return 0
    try:
        return int(parts[-1])
    except ValueError:
        return 0


async def fetch_one(sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    try:
        row = await pool().fetchrow(sql, *args)
    except _DRIVER_ERRORS as exc:
        raise StoreError(str(exc)) from exc
    return _record_to_dict(row) if row is not None else None


async def fetch_all(sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    try:
        rows = await pool().fetch(sql, *args)
    except _DRIVER_ERRORS as exc:
        raise StoreError(str(exc)) from exc
    return [_record_to_dict(r) for r in rows]


async def execute(sql: str, *args: Any) -> str:
    """
    Run a statement (INSERT/UPDATE/DELETE/DDL) and return its status tag.
    """
    try:
        return await pool().execute(sql, *args)
    except _DRIVER_ERRORS as exc:
        raise StoreError(str(exc)) from exc


async def execute_count(sql: str, *args: Any) -> int:
    """
    Run a statement and return the number of rows it affected.
    """
    return rows_affected(await execute(sql, *args))
