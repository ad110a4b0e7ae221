"""User provider exceptions.

Bad credentials and unknown users are never exceptions here; they are
reported as an absent result. These errors only cover a misconfigured
provider.
"""

from __future__ import annotations


class UserProviderError(Exception):
    """Base exception for user provider errors."""


class ConfigurationError(UserProviderError):
    """Raised when the user provider is misconfigured."""
