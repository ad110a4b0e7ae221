"""HTTP client for the remote identity service.

This module provides an async HTTP client that issues requests against the
identity service and normalizes every answer into a NormalizedResponse.
"""

from __future__ import annotations

from typing import Any

import httpx
import orjson

from identity_bridge.client.exceptions import (
    IdentityServiceResponseError,
    IdentityServiceTimeoutError,
    IdentityServiceUnavailableError,
)
from identity_bridge.client.models import ANONYMOUS, AuthContext, NormalizedResponse
from identity_bridge.observability.logging import get_logger


logger = get_logger(__name__)

SUPPORTED_METHODS = frozenset({"get", "post", "put", "patch", "delete"})


class RemoteIdentityClient:
    """Async HTTP client for the identity service.

    The client owns a pooled ``httpx.AsyncClient`` and is safe to share
    across concurrent requests: it never stores a bearer token. Each call
    receives an AuthContext that decides which Authorization header, if any,
    is sent.

    Example:
        ```python
        client = RemoteIdentityClient(
            base_url="https://api.example.com",
            client_id="42",
            client_secret="s3cret",
        )
        await client.initialize()

        response = await client.send("get", "users/7", query={"include": "company"})

        await client.shutdown()
        ```

    Attributes:
        base_url: Base URL of the identity service.
        client_id: OAuth client id used by the credential exchanges.
        client_secret: OAuth client secret used by the credential exchanges.
        timeout: HTTP request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str,
        client_id: str,
        client_secret: str,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the identity service client.

        Args:
            base_url: Base URL of the identity service.
            client_id: OAuth client id.
            client_secret: OAuth client secret.
            timeout: HTTP request timeout in seconds.
            transport: Optional custom transport, mostly for tests.
        """
        self.base_url = base_url.rstrip("/")
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout = timeout
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None

    def url_for(self, path: str) -> str:
        """Build an absolute URL for a resource path."""
        return f"{self.base_url}/{path.lstrip('/')}"

    async def initialize(self) -> None:
        """Initialize the HTTP client with connection pooling."""
        if self._http_client is not None:
            return

        self._http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            limits=httpx.Limits(
                max_keepalive_connections=10,
                max_connections=20,
            ),
            headers={"Accept": "application/json"},
            transport=self._transport,
        )
        logger.info(
            "RemoteIdentityClient initialized",
            base_url=self.base_url,
            timeout=self.timeout,
        )

    async def shutdown(self) -> None:
        """Close the HTTP client and release connections."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
            logger.debug("RemoteIdentityClient shutdown")

    async def send(
        self,
        method: str,
        path: str,
        query: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
        auth: AuthContext = ANONYMOUS,
    ) -> NormalizedResponse:
        """Send a request to the identity service.

        Args:
            method: HTTP method (get, post, put, patch, delete).
            path: Resource path relative to the base URL.
            query: Query string arguments.
            body: JSON body parameters.
            auth: Authorization context for this request.

        Returns:
            NormalizedResponse; non-2xx answers are returned, not raised.

        Raises:
            ValueError: If the method is not supported.
            IdentityServiceTimeoutError: If the request times out.
            IdentityServiceUnavailableError: If the service cannot be reached.
            IdentityServiceResponseError: If a 2xx body is not a JSON object.
        """
        verb = method.lower()
        if verb not in SUPPORTED_METHODS:
            msg = f"Unsupported HTTP method: {method}"
            raise ValueError(msg)

        if self._http_client is None:
            await self.initialize()

        assert self._http_client is not None

        url = self.url_for(path)
        headers = auth.headers()
        content = None
        if body is not None:
            content = orjson.dumps(body)
            headers["Content-Type"] = "application/json"

        logger.debug(
            "Sending identity service request",
            method=verb.upper(),
            url=url,
            authenticated=auth.is_authenticated,
        )

        try:
            response = await self._http_client.request(
                verb.upper(),
                url,
                params=query or None,
                content=content,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            logger.warning(
                "Identity service request timed out",
                url=url,
                timeout=self.timeout,
            )
            msg = f"Identity service timeout after {self.timeout}s"
            raise IdentityServiceTimeoutError(msg) from e
        except httpx.RequestError as e:
            logger.warning(
                "Identity service connection error",
                url=url,
                error=str(e),
            )
            msg = f"Cannot connect to identity service: {e}"
            raise IdentityServiceUnavailableError(msg) from e

        return self._normalize(response)

    def _normalize(self, response: httpx.Response) -> NormalizedResponse:
        """Decode a response into a NormalizedResponse.

        Raises:
            IdentityServiceResponseError: If a 2xx body is not a JSON object.
        """
        status_code = response.status_code
        success = response.is_success

        body: Any = None
        if response.content:
            try:
                body = orjson.loads(response.content)
            except orjson.JSONDecodeError as e:
                if success:
                    msg = "Identity service returned a malformed body"
                    raise IdentityServiceResponseError(status_code, msg) from e
                body = {"message": response.text or f"HTTP {status_code}"}

        if success and body is not None and not isinstance(body, dict):
            msg = "Identity service returned a non-object body"
            raise IdentityServiceResponseError(status_code, msg)

        if not success:
            logger.debug(
                "Identity service returned error",
                status_code=status_code,
                url=str(response.request.url),
            )

        return NormalizedResponse.from_body(status_code, body)
