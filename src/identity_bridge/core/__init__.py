"""Core infrastructure: configuration, lifespan and middleware."""
