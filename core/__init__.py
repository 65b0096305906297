"""Shared infrastructure: settings, database, Redis, caller identity, errors, metrics."""

from core.config import settings
from core.db import Base
from core.redis import close_redis

__all__ = ["settings", "Base", "close_redis"]
