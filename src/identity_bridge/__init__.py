"""Identity bridge: a user provider backed by a remote identity service."""

__version__ = "0.1.0"
