"""Application lifespan event handlers.

This module defines the lifespan context manager that handles:
- Application startup: configure logging, connect Redis, create the
  identity service client
- Application shutdown: close both connections
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from identity_bridge.auth.factory import create_identity_client
from identity_bridge.cache.redis import close_redis_pool, init_redis_pool
from identity_bridge.core.config import get_settings
from identity_bridge.observability.logging import get_logger, setup_logging


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage the identity service client and the token cache connection."""
    settings = get_settings()

    setup_logging(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        is_development=settings.is_development,
    )
    logger.info(
        "Starting identity bridge",
        app_name=settings.app.name,
        environment=settings.APP_ENV,
    )

    # Without Redis logins still work; tokens just are not cached
    try:
        app.state.cache_client = await init_redis_pool()
    except Exception:
        logger.exception("Failed to initialize Redis - continuing without token cache")
        app.state.cache_client = None

    # The identity service is critical - fail startup on misconfiguration
    client = create_identity_client(settings)
    await client.initialize()
    app.state.identity_client = client

    logger.info("Identity bridge startup complete")
    try:
        yield
    finally:
        logger.info("Shutting down identity bridge")
        await client.shutdown()
        app.state.identity_client = None
        await close_redis_pool()
        app.state.cache_client = None
