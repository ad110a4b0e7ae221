"""Identity service client models.

This module defines the per-request authorization context and the
normalized response envelope returned for every remote call.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class AuthContext(BaseModel):
    """Authorization state for a single logical operation.

    A fresh context is built for every call and passed explicitly to the
    client, so the shared HTTP client never carries a bearer token.

    Attributes:
        token: Bearer token to send, or None for an unauthenticated request.
    """

    token: str | None = None

    model_config = {"frozen": True}

    @property
    def is_authenticated(self) -> bool:
        """Whether a bearer token will be attached."""
        return bool(self.token)

    def headers(self) -> dict[str, str]:
        """Authorization headers for this context."""
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def __repr__(self) -> str:
        # Never leak the token into logs or tracebacks
        state = "bearer" if self.token else "anonymous"
        return f"AuthContext({state})"

    __str__ = __repr__


ANONYMOUS = AuthContext()


class NormalizedResponse(BaseModel):
    """Response from the identity service, reduced to what callers rely on.

    Attributes:
        success: True when the service answered with a 2xx status.
        status_code: HTTP status code of the response.
        data: Payload; the ``data`` member of the envelope when present,
            otherwise the whole JSON body. Only trustworthy when success is True.
        meta: The ``meta`` member of the envelope, if any.
        errors: Error details reported by the service on failure.
    """

    success: bool
    status_code: int
    data: dict[str, Any] = Field(default_factory=dict)
    meta: dict[str, Any] | None = None
    errors: list[Any] = Field(default_factory=list)

    model_config = {"frozen": True}

    @classmethod
    def from_body(cls, status_code: int, body: Any) -> NormalizedResponse:
        """Build a response from a decoded JSON body.

        Args:
            status_code: HTTP status code.
            body: Decoded JSON body (may be None for an empty body).
        """
        success = 200 <= status_code < 300
        if not isinstance(body, dict):
            return cls(success=success, status_code=status_code)

        payload = body.get("data", body)
        if not isinstance(payload, dict):
            payload = {"items": payload} if payload is not None else {}

        meta = body.get("meta")
        errors = body.get("errors") or []
        if not isinstance(errors, list):
            errors = [errors]
        if not success and not errors and body.get("message"):
            errors = [body["message"]]

        return cls(
            success=success,
            status_code=status_code,
            data=payload,
            meta=meta if isinstance(meta, dict) else None,
            errors=errors,
        )

    def payload_with_meta(self) -> dict[str, Any]:
        """Return a copy of the payload with ``meta`` merged in when non-empty."""
        payload = dict(self.data)
        if self.meta:
            payload["meta"] = dict(self.meta)
        return payload
