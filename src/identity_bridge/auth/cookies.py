"""Queued cookies.

Cookies set while authenticating are queued on a per-request jar and
written to the outgoing response once the request handler has finished.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel


if TYPE_CHECKING:
    from starlette.responses import Response


class QueuedCookie(BaseModel):
    """A cookie waiting to be written to a response."""

    name: str
    value: str
    max_age: int

    model_config = {"frozen": True}


class QueuedCookieJar:
    """Per-request cookie sink.

    Queuing the same name twice keeps the last value.
    """

    def __init__(
        self,
        *,
        secure: bool = False,
        http_only: bool = True,
        same_site: Literal["lax", "strict", "none"] = "lax",
    ) -> None:
        self.secure = secure
        self.http_only = http_only
        self.same_site = same_site
        self._queued: dict[str, QueuedCookie] = {}

    def queue(self, name: str, value: Any, ttl_seconds: int) -> None:
        self._queued[name] = QueuedCookie(
            name=name,
            value=str(value),
            max_age=ttl_seconds,
        )

    @property
    def queued(self) -> list[QueuedCookie]:
        return list(self._queued.values())

    def __len__(self) -> int:
        return len(self._queued)

    def apply(self, response: Response) -> None:
        """Write every queued cookie to ``response`` and empty the jar."""
        for cookie in self._queued.values():
            if cookie.max_age <= 0:
                response.delete_cookie(
                    cookie.name,
                    secure=self.secure,
                    httponly=self.http_only,
                    samesite=self.same_site,
                )
                continue
            response.set_cookie(
                cookie.name,
                cookie.value,
                max_age=cookie.max_age,
                secure=self.secure,
                httponly=self.http_only,
                samesite=self.same_site,
            )
        self._queued.clear()
