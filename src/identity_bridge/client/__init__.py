"""Identity service HTTP client, request builders and response models."""

from identity_bridge.client.exceptions import (
    IdentityServiceError,
    IdentityServiceResponseError,
    IdentityServiceTimeoutError,
    IdentityServiceUnavailableError,
)
from identity_bridge.client.identity_service import RemoteIdentityClient
from identity_bridge.client.models import ANONYMOUS, AuthContext, NormalizedResponse
from identity_bridge.client.resources import (
    ResourceRequest,
    profile_service,
    user_resource,
)


__all__ = [
    "ANONYMOUS",
    "AuthContext",
    "IdentityServiceError",
    "IdentityServiceResponseError",
    "IdentityServiceTimeoutError",
    "IdentityServiceUnavailableError",
    "NormalizedResponse",
    "RemoteIdentityClient",
    "ResourceRequest",
    "profile_service",
    "user_resource",
]
