"""Application lifecycle events."""
