"""Redis client management."""

import redis.asyncio as redis
from redis.asyncio import Redis

from opstracker.core.config import Settings, get_settings

# Global connection pool
_pool: redis.ConnectionPool | None = None


async def init_redis_pool(settings: Settings | None = None) -> None:
    """Initialize Redis connection pool."""
    global _pool
    if _pool is None:
        settings = settings or get_settings()
        _pool = redis.ConnectionPool.from_url(
            settings.redis_url,
            decode_responses=True,
            max_connections=settings.redis_max_connections,
        )


async def close_redis_pool() -> None:
    """Close Redis connection pool. Safe to call when never opened."""
    global _pool
    if _pool is not None:
        await _pool.disconnect()
        _pool = None


def get_redis() -> Redis:
    """Get Redis client from pool.

    Raises:
        RuntimeError: If pool not initialized
    """
    if _pool is None:
        raise RuntimeError("Redis pool not initialized. Call init_redis_pool() first.")
    return redis.Redis(connection_pool=_pool)


class StorageKeys:
    """Fixed key names of the persisted log and settings."""

    LOGS = "{prefix}:logs"
    SETTINGS = "{prefix}:settings"

    def __init__(self, prefix: str):
        self.logs = self.LOGS.format(prefix=prefix)
        self.settings = self.SETTINGS.format(prefix=prefix)
