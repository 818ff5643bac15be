from __future__ import annotations

import json
from functools import lru_cache
from typing import List

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, DotEnvSettingsSource, EnvSettingsSource, SettingsConfigDict


# List fields that may also be given as comma-separated strings.
_CSV_FIELDS = frozenset({"allow_origins"})

DEFAULT_ORIGINS = ["http://localhost", "http://localhost:5173", "http://127.0.0.1:5173"]


class _CsvFallbackMixin:
    def decode_complex_value(self, field_name, field, value):  # type: ignore[override]
        try:
            return super().decode_complex_value(field_name, field, value)
        except json.JSONDecodeError:
            if field_name in _CSV_FIELDS:
                return value
            raise


class _EnvSource(_CsvFallbackMixin, EnvSettingsSource):
    pass


class _DotEnvSource(_CsvFallbackMixin, DotEnvSettingsSource):
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    project_name: str = "Infoco Admin API"
    project_version: str = "1.0.0"
    environment: str = Field(
        default="development",
        description="Deployment environment name",
        validation_alias=AliasChoices("ENV", "ENVIRONMENT"),
    )
    log_level: str = Field(default="INFO", description="Logging level")

    # Database
    database_url: str = Field(
        default="sqlite+pysqlite:///./infoco.db",
        description="SQLAlchemy database URL",
    )
    db_pool_size: int = Field(default=5, description="Base DB connection pool size")
    db_max_overflow: int = Field(default=10, description="Additional DB connections beyond pool size")

    # Seed data for absent collections
    seed_defaults: bool = Field(
        default=True,
        description="Serve the bundled demo records for collections that were never written",
        validation_alias=AliasChoices("SEED_DEFAULTS", "INFOCO_SEED_DEFAULTS"),
    )

    # Auth / JWT
    jwt_secret: str = Field(default="change_me", description="JWT signing secret")
    algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    access_token_expire_minutes: int = Field(default=480, description="Access token expiry in minutes")

    # CORS
    allow_origins: List[str] = Field(default_factory=lambda: list(DEFAULT_ORIGINS))

    # Generative AI backend
    gemini_api_key: str | None = Field(
        default=None,
        description="API key for the Gemini generateContent endpoint",
        validation_alias=AliasChoices("API_KEY", "GEMINI_API_KEY"),
    )
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Base URL of the Gemini REST API",
    )
    gemini_model: str = Field(default="gemini-2.5-flash", description="Model used for analysis and news")
    ai_http_timeout_seconds: float = Field(
        default=60.0,
        description="Timeout for outbound AI requests",
        validation_alias=AliasChoices("AI_HTTP_TIMEOUT_SECONDS"),
    )
    news_cache_seconds: int = Field(
        default=3600,
        description="TTL for the cached news feed",
        validation_alias=AliasChoices("NEWS_CACHE_SECONDS"),
    )

    # Public tasks API
    public_api_key: str | None = Field(
        default=None,
        description="Bearer key required by the public tasks endpoint",
        validation_alias=AliasChoices("INFOCO_API_KEY", "PUBLIC_API_KEY"),
    )

    # Uploads
    max_image_size_mb: int = Field(default=2, description="Maximum size of uploaded images (MB)")

    @field_validator("allow_origins", mode="before")
    @classmethod
    def parse_allow_origins(cls, value: str | List[str]) -> List[str]:
        if isinstance(value, list):
            return value
        if isinstance(value, str) and value.strip():
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return list(DEFAULT_ORIGINS)

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "prod")

    @property
    def max_image_size_bytes(self) -> int:
        return self.max_image_size_mb * 1024 * 1024

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            _EnvSource(settings_cls),
            _DotEnvSource(settings_cls),
            file_secret_settings,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
