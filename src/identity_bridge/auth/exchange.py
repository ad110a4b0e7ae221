"""Credential exchanges against the identity service.

An exchange trades credentials for a bearer token. A rejected exchange is
the normal "bad credentials" outcome and is reported by returning an
ExchangeFailure instead of a token; only transport faults raise.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from identity_bridge.auth.models import ExchangeFailure
from identity_bridge.observability.logging import get_logger


if TYPE_CHECKING:
    from identity_bridge.client.identity_service import RemoteIdentityClient
    from identity_bridge.client.models import NormalizedResponse

logger = get_logger(__name__)

# Credential fields never forwarded to the email-only endpoint
_EMAIL_ONLY_EXCLUDED = frozenset({"password", "client_id", "client_secret"})


class CredentialExchanger:
    """Performs the login protocol of the identity service.

    Attributes:
        client: Shared identity service client.
        login_path: Path of the password grant endpoint.
        email_login_path: Path of the email-only authorization endpoint.
        scope: OAuth scope requested for issued tokens.
    """

    def __init__(
        self,
        client: RemoteIdentityClient,
        login_path: str = "oauth/token",
        email_login_path: str = "auth/email",
        scope: str = "*",
    ) -> None:
        self.client = client
        self.login_path = login_path
        self.email_login_path = email_login_path
        self.scope = scope

    async def login_via_password(
        self,
        email: str,
        password: str,
    ) -> str | ExchangeFailure:
        """Exchange an email and password for a bearer token.

        Args:
            email: Account email, used as the OAuth username.
            password: Plaintext password.

        Returns:
            The bearer token, or an ExchangeFailure when the service rejects
            the credentials.

        Raises:
            IdentityServiceError: On transport faults.
        """
        response = await self.client.send(
            "post",
            self.login_path,
            body={
                "grant_type": "password",
                "client_id": self.client.client_id,
                "client_secret": self.client.client_secret,
                "username": email,
                "password": password,
                "scope": self.scope,
            },
        )
        return self._token_from(response, grant="password")

    async def authorize_via_email_only(
        self,
        credentials: Mapping[str, Any],
    ) -> str | ExchangeFailure:
        """Exchange an email-derived proof for a bearer token.

        Every credential field except the password is forwarded, so
        provider-specific proofs reach the service unchanged.

        Raises:
            IdentityServiceError: On transport faults.
        """
        body = {
            key: value
            for key, value in credentials.items()
            if key not in _EMAIL_ONLY_EXCLUDED
        }
        body.setdefault("email", "")
        body["client_id"] = self.client.client_id
        body["client_secret"] = self.client.client_secret

        response = await self.client.send("post", self.email_login_path, body=body)
        return self._token_from(response, grant="email")

    def _token_from(
        self,
        response: NormalizedResponse,
        grant: str,
    ) -> str | ExchangeFailure:
        if not response.success:
            logger.info(
                "Credential exchange rejected",
                grant=grant,
                status_code=response.status_code,
            )
            return ExchangeFailure(reason="rejected", response=response)

        token = response.data.get("access_token") or response.data.get("token")
        if not isinstance(token, str) or not token:
            logger.warning(
                "Credential exchange succeeded without a token",
                grant=grant,
                status_code=response.status_code,
            )
            return ExchangeFailure(reason="missing access token", response=response)

        return token
