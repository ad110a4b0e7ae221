"""Authentication models.

This module defines the authenticated principal returned to the host and
the failure marker produced by credential exchanges.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from identity_bridge.client.models import NormalizedResponse


class UserRecord(BaseModel):
    """Snapshot of a user as reported by the identity service.

    A new instance is built for every successful retrieval and never mutated
    afterwards. Any attribute of the remote payload beyond the declared
    fields (``email``, ``company``, ...) is kept as an extra attribute.
    Only ``id`` is validated; other attributes are kept as sent, with the
    password hash and remember token read as text.

    Attributes:
        id: Unique user identifier.
        password: Stored password hash used by validate_credentials.
        remember_token: Long-lived "remember me" token.
        meta: Envelope metadata copied verbatim from the response, if any.
    """

    id: int | str
    password: str | None = Field(default=None, repr=False)
    remember_token: str | None = Field(default=None, repr=False)
    meta: Any = None

    model_config = ConfigDict(extra="allow", frozen=True)

    @field_validator("password", "remember_token", mode="before")
    @classmethod
    def _stringify_secret(cls, value: Any) -> str | None:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @classmethod
    def from_response(cls, response: NormalizedResponse) -> UserRecord:
        """Build a record from a successful response, merging ``meta``."""
        return cls.model_validate(response.payload_with_meta())

    @property
    def auth_identifier_name(self) -> str:
        return "id"

    @property
    def auth_identifier(self) -> int | str:
        return self.id

    @property
    def auth_password(self) -> str | None:
        return self.password

    @property
    def remember_token_name(self) -> str:
        return "remember_token"

    def get(self, key: str, default: Any = None) -> Any:
        """Return a payload attribute by name."""
        return self.to_dict().get(key, default)

    def to_dict(self) -> dict[str, Any]:
        """Return a detached copy of every attribute."""
        return self.model_dump(exclude_none=False)


class ExchangeFailure(BaseModel):
    """Marker returned when a credential exchange does not yield a token.

    Attributes:
        reason: Short description of why the exchange failed.
        response: The identity service response, when one was received.
    """

    reason: str
    response: NormalizedResponse | None = None

    model_config = {"frozen": True}

    @property
    def status_code(self) -> int | None:
        return self.response.status_code if self.response else None
