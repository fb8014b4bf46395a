"""
RecipeBox Configuration Module
Loads settings from environment variables with sensible defaults.
"""

import logging
from functools import lru_cache
from typing import List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "RecipeBox"
    debug: bool = False

    # Authentication
    secret_key: str = Field(..., min_length=32)  # Required, no default
    access_token_expire_minutes: int = 60 * 24 * 90  # 90 days
    jwt_algorithm: str = "HS256"

    # Rate Limiting
    rate_limit_enabled: bool = True  # Signup/login limit lives in app.api.rate_limit

    # Database
    database_url: str = Field(...)
    db_create_all: bool = False  # Create tables on startup (dev/tests only)

    # Redis (empty disables the stats cache)
    redis_url: str = ""
    stats_cache_ttl_seconds: int = 300

    # Requests
    request_timeout_seconds: float = 5.0
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173"

    # Logging
    log_dir: str = ""
    log_level: str = "INFO"

    # API Settings
    api_prefix: str = "/api"

    @field_validator('secret_key')
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        """Validate that the secret key is secure."""
        if not v or len(v) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters long")

        # Check for common insecure values
        insecure_values = [
            "change-me-in-production",
            "secret",
            "password",
            "test",
            "default",
            "changeme",
        ]
        if v.lower() in insecure_values or any(bad in v.lower() for bad in insecure_values):
            raise ValueError(
                "SECRET_KEY appears to be insecure. Generate a secure key with: "
                "python -c 'import secrets; print(secrets.token_hex(32))'"
            )

        return v

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse comma-separated CORS origins into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    try:
        return Settings()
    except Exception as e:
        logger.error("Configuration error: %s", e)
        raise
