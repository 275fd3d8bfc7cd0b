"""Application configuration using Pydantic Settings with YAML support.

This module provides centralized configuration management with:
- YAML-based configuration files organized by domain
- Environment-specific overrides (local, test, development, staging, production)
- Environment variable loading for secrets
- Type validation and coercion
- Caching for performance
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Annotated

from pydantic import BaseModel, BeforeValidator, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_source import LayeredYamlSettingsSource


if TYPE_CHECKING:
    from pydantic_settings import PydanticBaseSettingsSource


def parse_list(v: str | list[str] | None) -> list[str] | None:
    """Parse comma-separated string or list into list of strings."""
    if isinstance(v, str):
        return [x.strip() for x in v.split(",") if x.strip()]
    return v


# =============================================================================
# Nested Configuration Models (from YAML)
# =============================================================================


class AppSettings(BaseModel):
    """Application identity settings."""

    name: str = "Market Compare Service"
    version: str = "0.1.0"
    debug: bool = False


class ServerSettings(BaseModel):
    """Server configuration settings."""

    host: str = "127.0.0.1"
    port: int = 8000


class ApiSettings(BaseModel):
    """API configuration settings."""

    v1_prefix: str = "/api/v1/market-compare"
    cors_origins: Annotated[list[str], BeforeValidator(parse_list)] = []


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


class ComparisonSettings(BaseModel):
    """Vendor comparison engine configuration.

    Monetary values are kept as floats here and converted to ``Decimal`` by the
    engine. ``processed_keywords`` of ``None`` selects the built-in markers.
    """

    default_strategy: str = "cheapest"
    default_radius_km: float = Field(default=5.0, gt=0)
    rate_per_km: float = Field(default=1.5, ge=0)
    similarity_threshold: float = Field(default=0.45, gt=0, le=1)
    brand_tolerance_band: float = Field(default=0.10, ge=0, le=1)
    processed_keywords: Annotated[
        list[str] | None, BeforeValidator(parse_list)
    ] = None
    exclude_vendors_without_coordinates: bool = False
    max_concurrent_vendors: int = Field(default=8, ge=1)
    cache_enabled: bool = True
    cache_ttl: int = Field(default=900, ge=1)

    @field_validator("default_strategy")
    @classmethod
    def _validate_strategy(cls, value: str) -> str:
        # Imported lazily: the schemas package depends on nothing in core.
        from market_compare.schemas.enums import ComparisonStrategy

        try:
            return ComparisonStrategy(value.strip().lower()).value
        except ValueError:
            allowed = ", ".join(s.value for s in ComparisonStrategy)
            msg = f"Invalid default strategy: {value}. Must be one of: {allowed}"
            raise ValueError(msg) from None


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """Application settings with YAML + environment variable support.

    Configuration is loaded from multiple sources with the following priority
    (highest to lowest):
    1. Environment variables
    2. .env file (secrets only)
    3. Environment-specific YAML files (config/environments/{APP_ENV}/)
    4. Base YAML files (config/base/)
    5. Default values in code

    Environment variables can override any setting using the nested delimiter '__'.
    For example: COMPARISON__RATE_PER_KM=2.0 overrides comparison.rate_per_km.
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
    server: ServerSettings = ServerSettings()
    api: ApiSettings = ApiSettings()
    redis: RedisSettings = RedisSettings()
    logging: LoggingSettings = LoggingSettings()
    comparison: ComparisonSettings = ComparisonSettings()

    # Secrets (from .env only - never in YAML)
    REDIS_PASSWORD: str = ""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings loading order.

        Priority (highest to lowest): init values, environment variables,
        .env file, YAML files, Docker secrets.
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            LayeredYamlSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def redis_cache_url(self) -> str:
        """Build Redis cache connection URL.

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
            f"redis://{auth_part}{self.redis.host}:{self.redis.port}/"
            f"{self.redis.cache_db}"
        )

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
    """Get cached settings instance.

    Using lru_cache ensures settings are only loaded once,
    improving performance and consistency.
    """
    return Settings()


# Global settings instance for convenient imports
settings = get_settings()
