"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        SECGROUPS_DB_HOST: Database host (default: localhost)
        SECGROUPS_DB_PORT: Database port (default: 5432)
        SECGROUPS_DB_DATABASE: Database name (default: security_groups)
        SECGROUPS_DB_USERNAME: Database user (default: security_groups)
        SECGROUPS_DB_PASSWORD: Database password (required in production)
        SECGROUPS_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        SECGROUPS_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="SECGROUPS_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="security_groups", description="Database name")
    username: str = Field(default="security_groups", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class CacheSettings(BaseSettings):
    """Permission cache settings.

    Environment variables:
        SECGROUPS_CACHE_BACKEND: "memory" or "redis" (default: memory)
        SECGROUPS_CACHE_REDIS_URL: Redis URL (default: redis://localhost:6379/0)
        SECGROUPS_CACHE_KEY_PREFIX: Namespace for every key (default: security_groups)
        SECGROUPS_CACHE_DECISION_TTL_SECONDS: TTL of access decisions (default: 300)
        SECGROUPS_CACHE_GROUP_TTL_SECONDS: TTL of effective groups, effective
            permissions and hierarchy listings (default: 600)
    """

    model_config = SettingsConfigDict(
        env_prefix="SECGROUPS_CACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    backend: Literal["memory", "redis"] = Field(
        default="memory", description="Cache backend"
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0", description="Redis connection URL"
    )
    key_prefix: str = Field(
        default="security_groups", min_length=1, description="Cache key namespace"
    )
    decision_ttl_seconds: int = Field(
        default=300, ge=1, description="TTL of cached access decisions"
    )
    group_ttl_seconds: int = Field(
        default=600,
        ge=1,
        description="TTL of cached effective groups, permissions and hierarchies",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Security Groups API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def cache(self) -> CacheSettings:
        """Get cache settings."""
        return get_cache_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_cache_settings() -> CacheSettings:
    """Get cached permission cache settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return CacheSettings()
