"""Async database engine and session management."""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Optional

from sqlalchemy import DateTime, event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool
from sqlalchemy.types import TypeDecorator

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ReviewRoster models."""


def utcnow() -> datetime:
    """Timezone-aware current time, used for all stored timestamps."""
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """DateTime stored as UTC and always loaded timezone-aware.

    SQLite drops tzinfo on the way in, so values are normalized to UTC before
    binding and tagged as UTC when read back.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the async engine and hands out sessions.

    Args:
        url: SQLAlchemy database URL (async driver)
        echo: Echo SQL statements
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        engine_kwargs: dict = {"echo": echo}

        is_sqlite = url.startswith("sqlite")
        if is_sqlite and ":memory:" in url:
            # One shared connection, otherwise every checkout sees an empty database
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}

        self.engine = create_async_engine(url, **engine_kwargs)
        if is_sqlite:
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session; uncommitted work is rolled back on exit."""
        async with self.session_factory() as session:
            yield session

    async def create_tables(self) -> None:
        """Create all tables."""
        from .. import models  # noqa: F401  registers mappers on Base.metadata

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.debug("Created tables for %s", self.url)

    async def drop_tables(self) -> None:
        """Drop all tables."""
        from .. import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def close(self) -> None:
        """Dispose of the engine and its connection pool."""
        await self.engine.dispose()


# Global database instance
_db: Optional[Database] = None


def init_db(url: str, echo: bool = False) -> Database:
    """Initialize the global database.

    Args:
        url: Database URL
        echo: Echo SQL statements

    Returns:
        Database instance
    """
    global _db
    _db = Database(url, echo=echo)
    return _db


def get_db() -> Database:
    """Get the global database instance.

    Raises:
        RuntimeError: If the database has not been initialized
    """
    if _db is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _db
