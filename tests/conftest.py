"""Shared test fixtures for the identity bridge tests.

This module provides the mocked identity service, a mock Redis client and
the provider wiring used across the unit test modules.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, MagicMock

import pytest
import respx

from identity_bridge.auth.cookies import QueuedCookieJar
from identity_bridge.auth.provider import RemoteUserProvider
from identity_bridge.cache.token_cache import TokenCache
from identity_bridge.client.identity_service import RemoteIdentityClient
from identity_bridge.core.config import Settings, get_settings
from identity_bridge.observability.logging import clear_context
from tests.fixtures.identity import CLIENT_ID, CLIENT_SECRET, IDENTITY_BASE_URL


if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator


@pytest.fixture(autouse=True)
def reset_state() -> Iterator[None]:
    """Isolate cached settings and the logging context between tests."""
    get_settings.cache_clear()
    clear_context()
    yield
    get_settings.cache_clear()
    clear_context()


@pytest.fixture
def test_settings() -> Settings:
    """Settings pointing at the mocked identity service."""
    return Settings(
        APP_ENV="test",
        identity_service={"url": IDENTITY_BASE_URL, "client_id": CLIENT_ID},
        IDENTITY_SERVICE_CLIENT_SECRET=CLIENT_SECRET,
    )


@pytest.fixture
def identity_api() -> Iterator[respx.MockRouter]:
    """Mocked identity service; routes are relative to IDENTITY_BASE_URL."""
    with respx.mock(base_url=IDENTITY_BASE_URL, assert_all_called=False) as router:
        yield router


@pytest.fixture
async def identity_client() -> AsyncIterator[RemoteIdentityClient]:
    """Identity service client pointing at the mocked service."""
    client = RemoteIdentityClient(
        base_url=IDENTITY_BASE_URL,
        client_id=CLIENT_ID,
        client_secret=CLIENT_SECRET,
        timeout=5.0,
    )
    yield client
    await client.shutdown()


@pytest.fixture
def mock_redis() -> MagicMock:
    """Create a mock Redis client."""
    mock = MagicMock()
    mock.get = AsyncMock(return_value=None)
    mock.set = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def token_cache(mock_redis: MagicMock) -> TokenCache:
    return TokenCache(mock_redis, namespace="dorcas", ttl=86400)


@pytest.fixture
def cookie_jar() -> QueuedCookieJar:
    return QueuedCookieJar()


@pytest.fixture
def provider(
    identity_client: RemoteIdentityClient,
    token_cache: TokenCache,
    cookie_jar: QueuedCookieJar,
) -> RemoteUserProvider:
    """User provider wired to the mocked service, cache and cookie jar."""
    return RemoteUserProvider(identity_client, token_cache, cookie_jar)
