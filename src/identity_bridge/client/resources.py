"""Request builders for identity service resources.

A ResourceRequest addresses one resource path and accumulates query
arguments and body parameters before it is sent. Builder methods return a
new request, so a partially built request can be reused safely.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from identity_bridge.client.models import ANONYMOUS, AuthContext


if TYPE_CHECKING:
    from identity_bridge.client.identity_service import RemoteIdentityClient
    from identity_bridge.client.models import NormalizedResponse


class ResourceRequest:
    """Immutable builder for a single identity service request."""

    def __init__(
        self,
        client: RemoteIdentityClient,
        path: str,
        auth: AuthContext = ANONYMOUS,
        query: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> None:
        self._client = client
        self.path = path
        self.auth = auth
        self._query: dict[str, Any] = dict(query or {})
        self._body: dict[str, Any] = dict(body or {})

    @property
    def query(self) -> dict[str, Any]:
        return dict(self._query)

    @property
    def body(self) -> dict[str, Any]:
        return dict(self._body)

    def _copy(
        self,
        *,
        query: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> ResourceRequest:
        return ResourceRequest(
            self._client,
            self.path,
            self.auth,
            query=self._query if query is None else query,
            body=self._body if body is None else body,
        )

    def relationships(self, *names: str) -> ResourceRequest:
        """Ask the service to include related resources (``include=a,b``)."""
        existing = [n for n in str(self._query.get("include", "")).split(",") if n]
        for name in names:
            if name and name not in existing:
                existing.append(name)
        return self._copy(query={**self._query, "include": ",".join(existing)})

    def add_query_argument(self, name: str, value: Any) -> ResourceRequest:
        return self._copy(query={**self._query, name: value})

    def add_body_param(self, name: str, value: Any) -> ResourceRequest:
        return self._copy(body={**self._body, name: value})

    async def send(self, method: str) -> NormalizedResponse:
        """Send the request with the given HTTP method.

        Body parameters are only sent for methods other than GET.
        """
        body = self._body if method.lower() != "get" and self._body else None
        return await self._client.send(
            method,
            self.path,
            query=self._query,
            body=body,
            auth=self.auth,
        )


def user_resource(
    client: RemoteIdentityClient,
    identifier: Any,
    auth: AuthContext = ANONYMOUS,
    users_path: str = "users",
) -> ResourceRequest:
    """Build a request addressing a single user record.

    The identifier is percent-encoded as one path segment, so it can never
    address another resource.
    """
    segment = quote(str(identifier), safe="")
    return ResourceRequest(client, f"{users_path.strip('/')}/{segment}", auth)


def profile_service(
    client: RemoteIdentityClient,
    auth: AuthContext,
    profile_path: str = "me",
) -> ResourceRequest:
    """Build a request addressing the authenticated caller's own profile."""
    return ResourceRequest(client, profile_path.strip("/"), auth)
