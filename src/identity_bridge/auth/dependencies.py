"""FastAPI dependencies for the user provider.

The identity service client and the Redis client are created once by the
application lifespan and stored on ``app.state``. A new RemoteUserProvider
is built for every request, bound to that request's cookie jar.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import Depends, Request

from identity_bridge.auth.cookies import QueuedCookieJar
from identity_bridge.auth.factory import create_user_provider
from identity_bridge.auth.provider import RemoteUserProvider
from identity_bridge.client.identity_service import RemoteIdentityClient


def get_identity_client(request: Request) -> RemoteIdentityClient:
    """Return the shared identity service client.

    Raises:
        RuntimeError: If the application lifespan did not create it.
    """
    client: RemoteIdentityClient | None = getattr(
        request.app.state, "identity_client", None
    )
    if client is None:
        msg = "Identity client not initialized. Is the lifespan installed?"
        raise RuntimeError(msg)
    return client


def get_cookie_jar(request: Request) -> QueuedCookieJar:
    """Return the cookie jar of the current request.

    Falls back to a detached jar when QueuedCookieMiddleware is not
    installed; cookies queued on it are then never written.
    """
    jar: QueuedCookieJar | None = getattr(request.state, "cookie_jar", None)
    if jar is None:
        jar = QueuedCookieJar()
        request.state.cookie_jar = jar
    return jar


def get_user_provider(
    request: Request,
    client: Annotated[RemoteIdentityClient, Depends(get_identity_client)],
    cookies: Annotated[QueuedCookieJar, Depends(get_cookie_jar)],
) -> RemoteUserProvider:
    """Build the user provider for the current request."""
    cache_client: Any = getattr(request.app.state, "cache_client", None)
    return create_user_provider(client, cookies, cache_client)


UserProviderDep = Annotated[RemoteUserProvider, Depends(get_user_provider)]
