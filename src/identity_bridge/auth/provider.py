"""User provider backed by the remote identity service.

The provider implements the operations a host framework needs to resolve
and authenticate users, delegating every lookup to the identity service.
It holds no state of its own: users live in the identity service, bearer
tokens in the token cache.

A login runs strictly in sequence::

    START -> EXCHANGING -> (FAILED | TOKEN_ACQUIRED)
          -> FETCHING_PROFILE -> (FAILED | AUTHENTICATED)

FAILED is reported as None at every entry point. AUTHENTICATED queues the
user id cookie and caches the bearer token, once.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from identity_bridge.auth.exchange import CredentialExchanger
from identity_bridge.auth.models import ExchangeFailure, UserRecord
from identity_bridge.auth.passwords import BcryptPasswordVerifier
from identity_bridge.client.exceptions import (
    IdentityServiceError,
    IdentityServiceResponseError,
)
from identity_bridge.client.models import ANONYMOUS, AuthContext
from identity_bridge.client.resources import profile_service, user_resource
from identity_bridge.core.results import BestEffortResult
from identity_bridge.observability.logging import bind_context, get_logger


if TYPE_CHECKING:
    from identity_bridge.auth.protocol import (
        Authenticatable,
        CookieSink,
        PasswordVerifier,
    )
    from identity_bridge.cache.token_cache import TokenCache
    from identity_bridge.client.identity_service import RemoteIdentityClient
    from identity_bridge.client.models import NormalizedResponse
    from identity_bridge.client.resources import ResourceRequest

logger = get_logger(__name__)

DEFAULT_COOKIE_TTL = 24 * 60 * 60


class RemoteUserProvider:
    """Resolves users through the identity service.

    Build one provider per host request: the cookie sink it writes to is
    request scoped, while the client and token cache it uses are shared.

    Attributes:
        client: Shared identity service client.
        token_cache: Cache of bearer tokens keyed by user id.
        cookies: Sink for cookies queued after a successful login.
        exchanger: Performs the credential exchanges.
        verifier: Checks plaintext passwords against stored hashes.
    """

    def __init__(
        self,
        client: RemoteIdentityClient,
        token_cache: TokenCache,
        cookies: CookieSink,
        *,
        exchanger: CredentialExchanger | None = None,
        verifier: PasswordVerifier | None = None,
        config: Mapping[str, Any] | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            client: Shared identity service client.
            token_cache: Bearer token cache.
            cookies: Request-scoped cookie sink.
            exchanger: Credential exchanger; built from the client if omitted.
            verifier: Password verifier; bcrypt if omitted.
            config: Optional overrides: ``relation``, ``users_path``,
                ``profile_path``, ``cookie_name``, ``cookie_ttl``,
                ``remember_token_select_using``, ``remember_token_column``,
                ``attach_cached_token_on_lookup``.
        """
        self.client = client
        self.token_cache = token_cache
        self.cookies = cookies
        self.exchanger = exchanger or CredentialExchanger(client)
        self.verifier = verifier or BcryptPasswordVerifier()
        self.config: dict[str, Any] = dict(config or {})

        self.relation: str = self.config.get("relation", "company")
        self.users_path: str = self.config.get("users_path", "users")
        self.profile_path: str = self.config.get("profile_path", "me")
        self.cookie_name: str = self.config.get("cookie_name", "store_id")
        self.cookie_ttl: int = self.config.get("cookie_ttl", DEFAULT_COOKIE_TTL)
        self.remember_token_select_using: str = self.config.get(
            "remember_token_select_using", "email"
        )
        self.remember_token_column: str = self.config.get(
            "remember_token_column", "remember_token"
        )
        self.attach_cached_token_on_lookup: bool = self.config.get(
            "attach_cached_token_on_lookup", False
        )

    # =========================================================================
    # Lookups
    # =========================================================================

    async def retrieve_by_id(self, identifier: Any) -> UserRecord | None:
        """Retrieve a user by their unique identifier.

        The lookup is unauthenticated-by-token unless
        ``attach_cached_token_on_lookup`` is enabled.

        Raises:
            IdentityServiceError: On transport faults.
        """
        auth = await self._lookup_context(identifier)
        request = self._user(identifier, auth).relationships(self.relation)
        response = await request.send("get")
        return self._to_user(response)

    async def retrieve_by_token(
        self,
        identifier: Any,
        token: str,
    ) -> UserRecord | None:
        """Retrieve a user by identifier and "remember me" token.

        The identity service decides whether the token matches; an empty
        token never does and is not sent.

        Raises:
            IdentityServiceError: On transport faults.
        """
        if not token:
            return None

        auth = await self._lookup_context(identifier)
        request = (
            self._user(identifier, auth)
            .relationships(self.relation)
            .add_query_argument("select_using", self.remember_token_select_using)
            .add_query_argument("column", self.remember_token_column)
            .add_query_argument("value", token)
        )
        response = await request.send("get")
        return self._to_user(response)

    async def update_remember_token(
        self,
        user: Authenticatable,
        token: str,
    ) -> BestEffortResult:
        """Update the "remember me" token of a user.

        Exactly one write is issued. Its outcome is logged and returned but
        never raised, so callers must not assume the token was persisted.
        """
        identifier = user.auth_identifier
        request = self._user(identifier, ANONYMOUS).add_body_param("token", token)
        try:
            response = await request.send("put")
        except IdentityServiceError as e:
            logger.warning(
                "Remember token update failed",
                user_id=identifier,
                error=str(e),
            )
            return BestEffortResult.failed(str(e))

        if not response.success:
            logger.warning(
                "Remember token update rejected",
                user_id=identifier,
                status_code=response.status_code,
            )
            return BestEffortResult.failed(f"HTTP {response.status_code}")

        return BestEffortResult.succeeded()

    # =========================================================================
    # Logins
    # =========================================================================

    async def retrieve_by_credentials(
        self,
        credentials: Mapping[str, Any],
    ) -> UserRecord | None:
        """Log in with email and password and return the user.

        Raises:
            IdentityServiceError: On transport faults.
        """
        token = await self.exchanger.login_via_password(
            credentials.get("email") or "",
            credentials.get("password") or "",
        )
        return await self._complete_login(token)

    async def retrieve_by_email_only(
        self,
        credentials: Mapping[str, Any],
    ) -> UserRecord | None:
        """Log in with an email-derived proof (no password) and return the user.

        Raises:
            IdentityServiceError: On transport faults.
        """
        token = await self.exchanger.authorize_via_email_only(credentials)
        return await self._complete_login(token)

    def validate_credentials(
        self,
        user: UserRecord,
        credentials: Mapping[str, Any],
    ) -> bool:
        """Check the plaintext password in ``credentials`` against ``user``.

        No network I/O. A missing password or stored hash never validates.
        """
        plaintext = credentials.get("password")
        hashed = user.auth_password
        if not plaintext or not hashed:
            return False
        return self.verifier.check(plaintext, hashed)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _user(self, identifier: Any, auth: AuthContext) -> ResourceRequest:
        return user_resource(self.client, identifier, auth, self.users_path)

    async def _lookup_context(self, identifier: Any) -> AuthContext:
        if not self.attach_cached_token_on_lookup:
            return ANONYMOUS
        cached = await self.token_cache.get(identifier)
        return AuthContext(token=cached) if cached else ANONYMOUS

    def _to_user(self, response: NormalizedResponse) -> UserRecord | None:
        if not response.success:
            return None
        return self._build_user(response)

    def _build_user(self, response: NormalizedResponse) -> UserRecord:
        try:
            return UserRecord.from_response(response)
        except ValidationError as e:
            error = e.errors()[0]
            field = ".".join(str(part) for part in error["loc"]) or "user"
            msg = (
                "Identity service returned an unusable user: "
                f"{field}: {error['msg']}"
            )
            raise IdentityServiceResponseError(response.status_code, msg) from e

    async def _complete_login(
        self,
        token: str | ExchangeFailure,
    ) -> UserRecord | None:
        """Fetch the profile for a freshly issued token and record the login."""
        if isinstance(token, ExchangeFailure):
            return None

        auth = AuthContext(token=token)
        profile = profile_service(self.client, auth, self.profile_path)
        response = await profile.add_query_argument("include", self.relation).send("get")
        if not response.success:
            logger.info(
                "Profile fetch rejected after token exchange",
                status_code=response.status_code,
            )
            return None

        user = self._build_user(response)

        self.cookies.queue(self.cookie_name, user.id, self.cookie_ttl)
        await self.token_cache.put(user.id, token)

        bind_context(user_id=user.id)
        logger.info("User authenticated via identity service")
        return user
