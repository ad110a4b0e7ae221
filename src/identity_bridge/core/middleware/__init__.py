"""Custom middleware components."""

from identity_bridge.core.middleware.cookies import QueuedCookieMiddleware


__all__ = [
    "QueuedCookieMiddleware",
]
