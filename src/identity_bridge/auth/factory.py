"""User provider factory.

This module provides factory functions for the shared identity service
client and for the request-scoped user providers built on top of it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from identity_bridge.auth.exceptions import ConfigurationError
from identity_bridge.auth.exchange import CredentialExchanger
from identity_bridge.auth.provider import RemoteUserProvider
from identity_bridge.cache.token_cache import TokenCache
from identity_bridge.client.identity_service import RemoteIdentityClient
from identity_bridge.core.config import get_settings
from identity_bridge.observability.logging import get_logger


if TYPE_CHECKING:
    from redis.asyncio import Redis

    from identity_bridge.auth.protocol import CookieSink, PasswordVerifier
    from identity_bridge.core.config import Settings

logger = get_logger(__name__)


def create_identity_client(settings: Settings | None = None) -> RemoteIdentityClient:
    """Create the shared identity service client from configuration.

    Raises:
        ConfigurationError: If the URL, client id or client secret is missing.
    """
    if settings is None:
        settings = get_settings()

    service = settings.identity_service
    if not service.url:
        msg = "identity_service.url is required"
        raise ConfigurationError(msg)
    if not service.client_id:
        msg = "identity_service.client_id is required"
        raise ConfigurationError(msg)
    if not settings.IDENTITY_SERVICE_CLIENT_SECRET:
        msg = "IDENTITY_SERVICE_CLIENT_SECRET is required"
        raise ConfigurationError(msg)

    logger.info("Creating identity service client", base_url=service.url)
    return RemoteIdentityClient(
        base_url=service.url,
        client_id=service.client_id,
        client_secret=settings.IDENTITY_SERVICE_CLIENT_SECRET,
        timeout=service.timeout,
    )


def create_user_provider(
    client: RemoteIdentityClient,
    cookies: CookieSink,
    cache_client: Redis[Any] | None = None,
    *,
    settings: Settings | None = None,
    verifier: PasswordVerifier | None = None,
) -> RemoteUserProvider:
    """Create a user provider for one host request.

    Args:
        client: Shared identity service client.
        cookies: Cookie sink of the current request.
        cache_client: Redis client backing the token cache.
        settings: Application settings. If None, loaded from environment.
        verifier: Password verifier; bcrypt if omitted.
    """
    if settings is None:
        settings = get_settings()

    service = settings.identity_service
    token_cache = TokenCache(
        cache_client,
        namespace=settings.token_cache.namespace,
        ttl=settings.token_cache.ttl,
    )
    exchanger = CredentialExchanger(
        client,
        login_path=service.login_path,
        email_login_path=service.email_login_path,
        scope=service.scope,
    )
    provider_settings = settings.user_provider

    return RemoteUserProvider(
        client,
        token_cache,
        cookies,
        exchanger=exchanger,
        verifier=verifier,
        config={
            "relation": provider_settings.relation,
            "users_path": service.users_path,
            "profile_path": service.profile_path,
            "cookie_name": settings.cookies.user_id_name,
            "cookie_ttl": settings.cookies.ttl,
            "remember_token_select_using": (
                provider_settings.remember_token_select_using
            ),
            "remember_token_column": provider_settings.remember_token_column,
            "attach_cached_token_on_lookup": (
                provider_settings.attach_cached_token_on_lookup
            ),
        },
    )
