"""Redis caching layer.

This module provides:
- Redis connection management
- The bearer token cache used after a successful login
"""

from identity_bridge.cache.redis import close_redis_pool, init_redis_pool
from identity_bridge.cache.token_cache import DEFAULT_TOKEN_TTL, TokenCache


__all__ = [
    "DEFAULT_TOKEN_TTL",
    "TokenCache",
    "close_redis_pool",
    "init_redis_pool",
]
