"""Redis client and connection pool management.

This module provides:
- An async Redis connection pool for the bearer token cache
- Connection lifecycle management via lifespan events
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool

from identity_bridge.core.config import get_settings
from identity_bridge.observability.logging import get_logger


if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = get_logger(__name__)


class _RedisState:
    pool: ConnectionPool | None = None
    client: Redis[Any] | None = None


async def init_redis_pool() -> Redis[Any]:
    """Initialize the cache connection pool and verify connectivity.

    Should be called during application startup (lifespan).

    Returns:
        The cache Redis client.

    Raises:
        redis.ConnectionError: If Redis cannot be reached.
    """
    if _RedisState.client is not None:
        return _RedisState.client

    settings = get_settings()

    logger.info(
        "Initializing Redis connection",
        host=settings.redis.host,
        port=settings.redis.port,
        db=settings.redis.cache_db,
    )

    _RedisState.pool = ConnectionPool.from_url(
        settings.redis_cache_url,
        max_connections=settings.redis.max_connections,
        decode_responses=True,
    )
    _RedisState.client = redis.Redis(connection_pool=_RedisState.pool)

    try:
        await _RedisState.client.ping()
    except redis.ConnectionError:
        logger.exception("Failed to connect to Redis")
        await close_redis_pool()
        raise

    logger.info("Redis connection established successfully")
    return _RedisState.client


async def close_redis_pool() -> None:
    """Close the cache connection pool.

    Should be called during application shutdown (lifespan).
    """
    if _RedisState.client is not None:
        await _RedisState.client.aclose()
        _RedisState.client = None

    if _RedisState.pool is not None:
        await _RedisState.pool.disconnect()
        _RedisState.pool = None

    logger.info("Redis connection closed")

