"""User provider backed by a remote identity service.

This module provides:
- RemoteUserProvider: lookups, remember-me tokens and logins
- CredentialExchanger: trades credentials for bearer tokens
- UserRecord: the authenticated principal handed to the host
- Factory functions and FastAPI dependencies

Usage:
    from identity_bridge.auth import create_user_provider

    provider = create_user_provider(client, cookie_jar, cache_client)
    user = await provider.retrieve_by_credentials(
        {"email": "a@x.com", "password": "secret"}
    )
"""

from identity_bridge.auth.cookies import QueuedCookie, QueuedCookieJar
from identity_bridge.auth.exceptions import ConfigurationError, UserProviderError
from identity_bridge.auth.exchange import CredentialExchanger
from identity_bridge.auth.factory import create_identity_client, create_user_provider
from identity_bridge.auth.models import ExchangeFailure, UserRecord
from identity_bridge.auth.passwords import BcryptPasswordVerifier
from identity_bridge.auth.protocol import (
    Authenticatable,
    CookieSink,
    PasswordVerifier,
    UserProvider,
)
from identity_bridge.auth.provider import RemoteUserProvider


__all__ = [
    "Authenticatable",
    "BcryptPasswordVerifier",
    "ConfigurationError",
    "CookieSink",
    "CredentialExchanger",
    "ExchangeFailure",
    "PasswordVerifier",
    "QueuedCookie",
    "QueuedCookieJar",
    "RemoteUserProvider",
    "UserProvider",
    "UserProviderError",
    "UserRecord",
    "create_identity_client",
    "create_user_provider",
]
