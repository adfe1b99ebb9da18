# SPDX-License-Identifier: Apache-2.0

"""
Application settings.

Settings are built once at startup and handed to ``create_app``; nothing in
the package reads the process environment after that.
"""

from typing import List, Optional
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Environments that may run without a configured JWT secret
DEVELOPMENT_ENVIRONMENTS = ("development", "test")


class Settings(BaseSettings):
    """Service configuration loaded from the environment or a .env file."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    environment: str = "development"
    service_name: str = "disaster-relief-api"
    service_version: str = "1.0.0"
    port: int = 5000

    mongodb_uri: str = "mongodb://localhost:27017/disaster_relief"
    mongodb_database: str = "disaster_relief"
    mongodb_max_pool_size: int = 10
    mongodb_server_selection_timeout_ms: int = 5000

    # Empty disables rate limiting
    redis_url: str = ""

    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    jwt_expire_days: int = Field(default=7, ge=1)

    rate_limit_max: int = Field(default=100, ge=1)
    rate_limit_window_seconds: int = Field(default=900, ge=1)

    # Comma separated
    cors_allowed_origins: str = "*"

    otel_enabled: bool = False
    otel_exporter_otlp_endpoint: Optional[str] = None
    log_level: Optional[str] = None

    @model_validator(mode="after")
    def require_jwt_secret_outside_development(self):
        if self.environment in DEVELOPMENT_ENVIRONMENTS:
            return self
        if len(self.jwt_secret) < 32:
            raise ValueError("JWT_SECRET must be set to at least 32 characters outside development")
        return self

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]

    @property
    def is_development(self) -> bool:
        return self.environment in DEVELOPMENT_ENVIRONMENTS
