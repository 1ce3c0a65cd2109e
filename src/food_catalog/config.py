"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    off_base_url: str = "https://world.openfoodfacts.org"
    default_category: str = "snacks"
    search_cache_ttl_seconds: int = 300
    search_page_size: int = 100
    fuzzy_page_size: int = 20
    http_timeout_seconds: float = 15
    user_agent: str = "FoodCatalog/1.0"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
