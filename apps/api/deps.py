"""FastAPI dependencies."""

from collections.abc import AsyncGenerator

import redis.asyncio as redis
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import CallerContext, caller_context
from core.db import get_db as _get_db
from core.redis import get_redis as _get_redis

__all__ = ["CallerContext", "caller_context", "get_db", "get_redis_client"]


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async for session in _get_db():
        yield session


async def get_redis_client() -> redis.Redis:
    """Get Redis client dependency."""
    return await _get_redis()
