"""Bearer token cache.

Maps a user id to the bearer token issued by the identity service at the
user's last successful login. Keys have the form
``<namespace>.auth_token.<user_id>`` and expire after a fixed TTL that is
independent of the token's own lifetime inside the identity service.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from redis.exceptions import RedisError

from identity_bridge.core.results import BestEffortResult
from identity_bridge.observability.logging import get_logger


if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = get_logger(__name__)

DEFAULT_TOKEN_TTL = 24 * 60 * 60


class TokenCache:
    """Redis-backed store of bearer tokens keyed by user id.

    Writes are blind overwrites: the last successful login for a user wins.
    Cache failures are logged and never raised.

    Attributes:
        namespace: Key prefix shared with other consumers of the cache.
        ttl: Lifetime of a cached token in seconds.
    """

    def __init__(
        self,
        cache_client: Redis[Any] | None,
        namespace: str = "dorcas",
        ttl: int = DEFAULT_TOKEN_TTL,
    ) -> None:
        self.cache_client = cache_client
        self.namespace = namespace
        self.ttl = ttl

    def key_for(self, user_id: Any) -> str:
        """Return the cache key holding the token of ``user_id``."""
        return f"{self.namespace}.auth_token.{user_id}"

    async def put(self, user_id: Any, token: str) -> BestEffortResult:
        """Store ``token`` for ``user_id`` with the configured TTL."""
        if self.cache_client is None:
            return BestEffortResult.failed("token cache not configured")

        key = self.key_for(user_id)
        try:
            await self.cache_client.set(key, token, ex=self.ttl)
        except RedisError as e:
            logger.warning("Failed to cache auth token", key=key, error=str(e))
            return BestEffortResult.failed(str(e))

        logger.debug("Cached auth token", key=key, ttl=self.ttl)
        return BestEffortResult.succeeded()

    async def get(self, user_id: Any) -> str | None:
        """Return the cached token for ``user_id``, or None when absent."""
        if self.cache_client is None:
            return None

        key = self.key_for(user_id)
        try:
            cached = await self.cache_client.get(key)
        except RedisError as e:
            logger.warning("Failed to read auth token from cache", key=key, error=str(e))
            return None

        if cached is None:
            return None
        if isinstance(cached, bytes):
            cached = cached.decode()
        return cached or None
