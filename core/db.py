from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import Table, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from core.config import settings

engine_kwargs: dict[str, Any] = {"echo": False, "pool_pre_ping": True}
# SQLite (tests, local runs) does not accept queue pool sizing
if not settings.database_url.startswith("sqlite"):
    engine_kwargs.update(pool_size=10, max_overflow=20)

# Create async engine
engine = create_async_engine(settings.database_url, **engine_kwargs)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


def insert_for(db: AsyncSession, table: Table) -> Any:
    """
    Build an INSERT that supports ON CONFLICT for the session's dialect.

    PostgreSQL in production, SQLite in tests; both expose
    on_conflict_do_nothing / on_conflict_do_update with the same signature.
    """
    if db.get_bind().dialect.name == "postgresql":
        return pg_insert(table)
    return sqlite_insert(table)


async def advisory_xact_lock(db: AsyncSession, key: int) -> None:
    """
    Hold a PostgreSQL advisory lock on key until the current transaction ends.

    SQLite serialises writers on the database lock, so this is a no-op there.
    """
    if db.get_bind().dialect.name != "postgresql":
        return
    await db.execute(select(func.pg_advisory_xact_lock(key)))
