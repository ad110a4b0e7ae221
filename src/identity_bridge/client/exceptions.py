"""Identity service client exceptions.

These represent transport faults only. A request the remote service answers
with a non-success status is not an exception: it comes back as a
NormalizedResponse with ``success=False``.
"""

from __future__ import annotations


class IdentityServiceError(Exception):
    """Base exception for identity service client errors."""


class IdentityServiceUnavailableError(IdentityServiceError):
    """Raised when the identity service cannot be reached."""


class IdentityServiceTimeoutError(IdentityServiceUnavailableError):
    """Raised when a request to the identity service times out."""


class IdentityServiceResponseError(IdentityServiceError):
    """Raised when a successful response carries a body that cannot be used.

    The service answered 2xx but the body is not a JSON object, or the
    user it describes has no usable id.
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        super().__init__(message)
