"""Application configuration.

Loads settings from environment variables (or ``.env``) with defaults
suited to the docker-compose development stack.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://storefront:storefront_dev_password@db:5432/storefront"

    # Catalog
    store_timeout_seconds: float = Field(default=5.0, gt=0)
    featured_items_limit: int = Field(default=8, ge=1, le=50)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    cache_max_age_seconds: int = Field(default=60, ge=0)

    # CORS
    client_origin: str = "http://localhost:5173"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    @field_validator("currency", "log_level")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.upper()

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
