"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Required fields (SECRET_KEY) are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except secret_key, which is
    validated in validate_required.
    """

    # App
    app_name: str = "dispatch-authz"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (SQLAlchemy + Alembic). Empty URL = SQL not configured.
    database_url: str = ""
    database_echo: bool = False
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # Security
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 15

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Request / middleware
    request_id_header: str = "X-Request-ID"

    # Permission cache: per-process, fixed TTL from population time.
    permission_cache_ttl_seconds: int = 60

    # Redis pub/sub for broadcasting cache invalidations to other instances.
    permission_broadcast_enabled: bool = False
    permission_broadcast_channel: str = "permission_invalidation"
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate required env and value ranges."""
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required. Generate with: openssl rand -hex 32."
            )
        if self.permission_cache_ttl_seconds <= 0:
            raise ValueError("PERMISSION_CACHE_TTL_SECONDS must be positive")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached Settings instance (loaded once per process)."""
    return Settings()
