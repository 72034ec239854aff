"""Async engine and per-request sessions for the catalog database.

The engine connects lazily, so importing this module does not need a running
database. SQLite connections enforce foreign keys so join rows cascade with
their recipe or ingredient.
"""

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Annotated, Any

from dotenv import load_dotenv
from fastapi import Depends
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)


DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./recipe_catalog.db"

# Sync or driverless Postgres schemes, rewritten to the asyncpg driver
_ASYNCPG_SCHEMES = (
    "postgres://",
    "postgresql://",
    "postgresql+psycopg2://",
    "postgresql+psycopg://",
)


def _load_env_files() -> None:  # pragma: no cover - side-effect only
    # The first .env or .env.dev found walking up from this file wins
    here = Path(__file__).resolve()
    for fname in (".env", ".env.dev"):
        found = [p / fname for p in here.parents if (p / fname).exists()]
        if found:
            load_dotenv(dotenv_path=found[0], override=False)
            return


def normalize_database_url(url: str) -> str:
    """Point Postgres URLs at asyncpg, which spells ``sslmode`` as ``ssl``."""
    for scheme in _ASYNCPG_SCHEMES:
        if url.startswith(scheme):
            url = "postgresql+asyncpg://" + url[len(scheme) :]
            break
    if url.startswith("postgresql+asyncpg://"):
        url = url.replace("sslmode=", "ssl=")
    return url


def _database_url_from_env() -> str:
    _load_env_files()

    url = os.getenv("DATABASE_URL")
    if url:
        return normalize_database_url(url)

    parts = [os.getenv(f"POSTGRES_{key}") for key in ("USER", "PASSWORD", "DB")]
    if all(parts):
        user, password, database = parts
        host = os.getenv("POSTGRES_HOST", "localhost")
        port = os.getenv("POSTGRES_PORT", "5432")
        return f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{database}"

    return DEFAULT_DATABASE_URL


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Turn on FOREIGN KEY enforcement for every new SQLite connection."""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection: Any, _record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


DATABASE_URL = _database_url_from_env()
engine: AsyncEngine = create_async_engine(DATABASE_URL, future=True, echo=False)
enable_sqlite_foreign_keys(engine)
AsyncSessionLocal = async_sessionmaker(
    engine,
    expire_on_commit=False,
    class_=AsyncSession,
)


async def get_db() -> AsyncIterator[AsyncSession]:
    """Hand each request its own session; writes commit per action."""
    async with AsyncSessionLocal() as session:
        yield session


DbSession = Annotated[AsyncSession, Depends(get_db)]
