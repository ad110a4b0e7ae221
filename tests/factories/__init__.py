"""Factories for identity bridge test data."""

from tests.factories.user import UserRecordFactory, user_payload


__all__ = [
    "UserRecordFactory",
    "user_payload",
]
