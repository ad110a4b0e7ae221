"""Identity bridge configuration.

Settings are grouped per collaborator (identity service, token cache,
cookies, user provider, Redis, logging) and read from the environment with
``__`` as the nesting delimiter. Secrets come from ``.env``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


# =============================================================================
# Nested Configuration Models
# =============================================================================


class AppSettings(BaseModel):
    """Application identity settings."""

    name: str = "Identity Bridge"
    version: str = "0.1.0"
    debug: bool = False


class IdentityServiceSettings(BaseModel):
    """Remote identity service settings."""

    url: str | None = None
    client_id: str | None = None
    timeout: float = 5.0
    login_path: str = "oauth/token"
    email_login_path: str = "auth/email"
    profile_path: str = "me"
    users_path: str = "users"
    scope: str = "*"


class TokenCacheSettings(BaseModel):
    """Bearer token cache settings."""

    namespace: str = "dorcas"
    ttl: int = 86400  # 24 hours


class CookieSettings(BaseModel):
    """Settings for cookies queued after a successful login."""

    user_id_name: str = "store_id"
    ttl: int = 86400  # 24 hours
    secure: bool = False
    http_only: bool = True
    same_site: Literal["lax", "strict", "none"] = "lax"


class UserProviderSettings(BaseModel):
    """User provider behaviour settings."""

    relation: str = "company"
    remember_token_select_using: str = "email"
    remember_token_column: str = "remember_token"
    # Lookups by id stay unauthenticated-by-token unless explicitly enabled
    attach_cached_token_on_lookup: bool = False


class RedisSettings(BaseModel):
    """Redis configuration settings."""

    host: str = "localhost"
    port: int = 6379
    user: str | None = None  # Redis ACL username (Redis 6.0+)
    cache_db: int = 0
    max_connections: int = 20


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: str = "INFO"
    format: str = "json"


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """Application settings with environment variable support.

    Configuration is loaded from the following sources (highest to lowest):
    1. Values passed to ``Settings()``
    2. Environment variables
    3. .env file (secrets)
    4. Default values in code

    Environment variables can override any setting using the nested delimiter '__'.
    For example: IDENTITY_SERVICE__URL=https://api.example.com overrides
    identity_service.url.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
        env_nested_delimiter="__",
    )

    APP_ENV: str = "development"

    app: AppSettings = AppSettings()
    identity_service: IdentityServiceSettings = IdentityServiceSettings()
    token_cache: TokenCacheSettings = TokenCacheSettings()
    cookies: CookieSettings = CookieSettings()
    user_provider: UserProviderSettings = UserProviderSettings()
    redis: RedisSettings = RedisSettings()
    logging: LoggingSettings = LoggingSettings()

    # =========================================================================
    # Secrets (from .env only)
    # =========================================================================
    IDENTITY_SERVICE_CLIENT_SECRET: str | None = None
    REDIS_PASSWORD: str = ""

    # =========================================================================
    # Computed Fields
    # =========================================================================

    @property
    def redis_cache_url(self) -> str:
        """Build Redis cache connection URL.

        Supports Redis 6.0+ ACL authentication with username.
        URL format: redis://[user:password@]host:port/db
        """
        auth_part = ""
        if self.redis.user and self.REDIS_PASSWORD:
            auth_part = f"{self.redis.user}:{self.REDIS_PASSWORD}@"
        elif self.REDIS_PASSWORD:
            auth_part = f":{self.REDIS_PASSWORD}@"
        elif self.redis.user:
            auth_part = f"{self.redis.user}@"

        return (
            f"redis://{auth_part}{self.redis.host}:{self.redis.port}"
            f"/{self.redis.cache_db}"
        )

    # =========================================================================
    # Environment Helpers
    # =========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.APP_ENV == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.APP_ENV == "production"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, loaded on first use."""
    return Settings()
