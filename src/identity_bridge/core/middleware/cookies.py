"""Queued cookie middleware.

This middleware:
- Attaches a fresh QueuedCookieJar to request.state for every request
- Clears the logging context so request-scoped values do not leak
- Writes the cookies queued during the request to the response
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from identity_bridge.auth.cookies import QueuedCookieJar
from identity_bridge.core.config import get_settings
from identity_bridge.observability.logging import clear_context


if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp

    from identity_bridge.core.config import Settings


class QueuedCookieMiddleware(BaseHTTPMiddleware):
    """Flushes cookies queued by the user provider onto the response."""

    def __init__(self, app: ASGIApp, settings: Settings | None = None) -> None:
        super().__init__(app)
        self.settings = settings or get_settings()

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        clear_context()

        cookie_settings = self.settings.cookies
        jar = QueuedCookieJar(
            secure=cookie_settings.secure,
            http_only=cookie_settings.http_only,
            same_site=cookie_settings.same_site,
        )
        request.state.cookie_jar = jar

        response = await call_next(request)

        jar.apply(response)
        return response
