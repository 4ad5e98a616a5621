"""Database engine, session factory and declarative base."""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from grocery_api.config import settings


class Base(DeclarativeBase):
    """Declarative base for all models."""


def make_engine(url: str, **kwargs: Any) -> AsyncEngine:
    """Create an async engine.

    SQLite connections get foreign keys enabled and explicit BEGIN handling so
    that SAVEPOINTs behave the same way they do on PostgreSQL.
    """
    engine = create_async_engine(url, **kwargs)

    if engine.dialect.name == "sqlite":

        @event.listens_for(engine.sync_engine, "connect")
        def _sqlite_connect(dbapi_connection, connection_record):
            # Let SQLAlchemy emit BEGIN instead of the driver
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(engine.sync_engine, "begin")
        def _sqlite_begin(conn):
            conn.exec_driver_sql("BEGIN")

    return engine


def make_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


engine = make_engine(settings.database_url, echo=settings.database_echo)
async_session_maker = make_sessionmaker(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session for one request, committing on success."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory used by the sync engine to open one unit of work per stage."""
    return async_session_maker


async def close_db() -> None:
    """Dispose of the engine connection pool."""
    await engine.dispose()
