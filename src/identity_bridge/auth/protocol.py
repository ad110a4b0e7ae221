"""Protocols at the seams between the user provider and its host.

Using Protocols keeps the provider independent of any particular web
framework, cookie implementation or password hashing library while still
allowing static type checking.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable


if TYPE_CHECKING:
    from identity_bridge.auth.models import UserRecord
    from identity_bridge.core.results import BestEffortResult


@runtime_checkable
class Authenticatable(Protocol):
    """Anything the host can hand back to the provider as a principal."""

    @property
    def auth_identifier(self) -> Any: ...


@runtime_checkable
class CookieSink(Protocol):
    """Queues cookies to be attached to the outgoing response."""

    def queue(self, name: str, value: Any, ttl_seconds: int) -> None: ...


@runtime_checkable
class PasswordVerifier(Protocol):
    """One-way password verification primitive."""

    def check(self, plaintext: str, hashed: str) -> bool: ...


@runtime_checkable
class UserProvider(Protocol):
    """Operations a host framework requires of an identity provider.

    Every lookup returns None when no user can be resolved, whether the
    user does not exist or the supplied credentials were rejected. Only
    transport faults raise.
    """

    async def retrieve_by_id(self, identifier: Any) -> UserRecord | None:
        """Retrieve a user by their unique identifier."""
        ...

    async def retrieve_by_token(
        self,
        identifier: Any,
        token: str,
    ) -> UserRecord | None:
        """Retrieve a user by identifier and "remember me" token."""
        ...

    async def update_remember_token(
        self,
        user: Authenticatable,
        token: str,
    ) -> BestEffortResult:
        """Update the "remember me" token of a user (best effort)."""
        ...

    async def retrieve_by_credentials(
        self,
        credentials: Mapping[str, Any],
    ) -> UserRecord | None:
        """Log in with email and password and return the user."""
        ...

    async def retrieve_by_email_only(
        self,
        credentials: Mapping[str, Any],
    ) -> UserRecord | None:
        """Log in with an email-derived proof (no password) and return the user."""
        ...

    def validate_credentials(
        self,
        user: UserRecord,
        credentials: Mapping[str, Any],
    ) -> bool:
        """Check a plaintext password against the user's stored hash."""
        ...
