"""Application configuration using Pydantic Settings.

All settings are loaded from environment variables or .env file.
Secrets are handled via SecretStr to prevent accidental logging.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """Application settings with validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="SKS_",
    )

    # Application
    app_name: str = "Skill Scope"
    app_version: str = "0.1.0"
    environment: Environment = Environment.DEVELOPMENT
    log_level: str = "INFO"

    # Project template catalog
    template_catalog_path: str | None = None  # None = bundled catalog

    # Live template enrichment (roadmap.sh)
    live_templates_enabled: bool = False
    roadmap_base_url: str = "https://roadmap.sh"
    template_fetch_timeout: float = Field(default=10.0, gt=0)

    # Skill extraction fan-out
    extraction_fast_timeout: float = Field(default=5.0, gt=0)
    extraction_slow_timeout: float = Field(default=8.0, gt=0)

    # Job matching
    max_recommended_projects: int = Field(default=5, ge=0)

    # GitHub (optional, only used as auth header for fetches)
    github_token: SecretStr | None = None

    # Prometheus
    metrics_enabled: bool = True
    metrics_port: int | None = None  # None = no standalone metrics server

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        return v.lower()

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
