"""Pytest fixtures for testing."""

import os
from collections.abc import AsyncGenerator
from datetime import datetime
from typing import Any
from unittest.mock import AsyncMock, patch

# Set environment variables for tests BEFORE importing app modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-must-be-at-least-32-characters-long"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "15"
os.environ["REFRESH_TOKEN_EXPIRE_DAYS"] = "30"
os.environ["SYNC_RETRY_DELAY_MS"] = "0"
os.environ["LOG_FORMAT"] = "text"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

# Clear the settings cache to pick up test env vars
from grocery_api.config import get_settings
get_settings.cache_clear()

from grocery_api.database import Base, get_db, get_session_factory, make_engine, make_sessionmaker
from grocery_api.models import ShoppingItem, ShoppingList, StoreLocation, User
from grocery_api.redis import TokenBlocklist
from grocery_api.security import create_access_token, hash_password
from grocery_api.utils import new_sync_id, utcnow


@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """File-backed SQLite in WAL mode so a request session and stage sessions can coexist."""
    engine = make_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)

    @event.listens_for(engine.sync_engine, "connect")
    def _wal(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return make_sessionmaker(engine)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def token_blocklist() -> Any:
    """Keep Redis out of the tests; nothing is blocklisted unless a test says so."""
    with patch.object(TokenBlocklist, "is_blocked", AsyncMock(return_value=False)) as is_blocked, \
            patch.object(TokenBlocklist, "add", AsyncMock()) as add:
        yield {"is_blocked": is_blocked, "add": add}


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client bound to the test database."""
    # Import here so the env vars above are in place first
    from grocery_api.main import app

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


async def create_user(session: AsyncSession, username: str, password: str = "password123") -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash=hash_password(password),
    )
    session.add(user)
    await session.commit()
    return user


@pytest_asyncio.fixture
async def user(db_session: AsyncSession) -> User:
    return await create_user(db_session, "alice")


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await create_user(db_session, "bob")


@pytest.fixture
def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def other_auth_headers(other_user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(other_user.id)}"}


async def add_list(
    session: AsyncSession,
    owner: User,
    name: str = "Groceries",
    sync_id: str | None = None,
    updated_at: datetime | None = None,
    last_synced: datetime | None = None,
) -> ShoppingList:
    now = utcnow()
    shopping_list = ShoppingList(
        name=name,
        user_id=owner.id,
        sync_id=sync_id or new_sync_id(),
        created_at=now,
        updated_at=updated_at or now,
        last_synced=last_synced or now,
        version=0,
    )
    session.add(shopping_list)
    await session.commit()
    return shopping_list


async def add_item(
    session: AsyncSession,
    shopping_list: ShoppingList,
    name: str = "Milk",
    sync_id: str | None = None,
    updated_at: datetime | None = None,
    last_synced: datetime | None = None,
    **fields: Any,
) -> ShoppingItem:
    now = utcnow()
    item = ShoppingItem(
        name=name,
        shopping_list_id=shopping_list.id,
        sync_id=sync_id or new_sync_id(),
        created_at=now,
        updated_at=updated_at or now,
        last_synced=last_synced or now,
        version=0,
        **fields,
    )
    session.add(item)
    await session.commit()
    return item


async def add_store(
    session: AsyncSession,
    owner: User,
    name: str = "Corner Shop",
    geofence_id: str = "geo-1",
    sync_id: str | None = None,
    latitude: float = 52.52,
    longitude: float = 13.405,
    updated_at: datetime | None = None,
) -> StoreLocation:
    now = utcnow()
    store = StoreLocation(
        name=name,
        address="1 Main Street",
        latitude=latitude,
        longitude=longitude,
        geofence_id=geofence_id,
        user_id=owner.id,
        sync_id=sync_id,
        created_at=now,
        updated_at=updated_at or now,
        last_synced=now,
        version=0,
    )
    session.add(store)
    await session.commit()
    return store


@pytest.fixture
def make_list(db_session: AsyncSession):
    async def _make(owner: User, **kwargs: Any) -> ShoppingList:
        return await add_list(db_session, owner, **kwargs)

    return _make


@pytest.fixture
def make_item(db_session: AsyncSession):
    async def _make(shopping_list: ShoppingList, **kwargs: Any) -> ShoppingItem:
        return await add_item(db_session, shopping_list, **kwargs)

    return _make


@pytest.fixture
def make_store(db_session: AsyncSession):
    async def _make(owner: User, **kwargs: Any) -> StoreLocation:
        return await add_store(db_session, owner, **kwargs)

    return _make
