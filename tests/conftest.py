"""Shared test fixtures for pytest.

We set minimal env defaults (SECRET_KEY, ENVIRONMENT, DATABASE_URL) early so
importing modules that instantiate settings or the engine succeeds without
an external .env file during tests. Every test gets its own in-memory SQLite
database; the app's ``get_db`` is overridden to hand out sessions bound to it.
"""

import os
from collections.abc import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool


os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from core.security import create_access_token
from crud.user import user_crud
from dependencies.db import enable_sqlite_foreign_keys, get_db
from main import app
from models import Base
from models.users import User


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", future=True, poolclass=StaticPool
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(
    db_engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Async client talking to the real app over the test database.

    Redirects are not followed so tests can assert on 303 responses.
    """

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
    app.dependency_overrides.pop(get_db, None)


async def _make_user(
    db: AsyncSession, username: str, *, is_admin: bool = False
) -> User:
    return await user_crud.create(
        db,
        username=username,
        email=f"{username}@example.com",
        password="correct-horse-battery",
        is_admin=is_admin,
    )


@pytest_asyncio.fixture
async def user(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "alice")


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "bob")


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "root_admin", is_admin=True)


@pytest.fixture
def auth_headers() -> Callable[[User], dict[str, str]]:
    """Build a bearer Authorization header for a user."""

    def _headers(for_user: User) -> dict[str, str]:
        token = create_access_token(for_user.id)
        return {"Authorization": f"Bearer {token}"}

    return _headers
