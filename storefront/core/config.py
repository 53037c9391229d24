"""Storefront Configuration"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STOREFRONT_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Storefront Checkout"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8001

    # Money
    currency: str = "USD"

    # Order numbers
    order_number_prefix: str = "ORD"
    order_number_max_attempts: int = Field(default=3, ge=1)

    # Checkout
    persistence_timeout_seconds: float = Field(default=5.0, gt=0)

    # Sessions
    session_max_age_hours: int = Field(default=24, ge=1)

    # Catalog listing
    default_page_size: int = Field(default=12, ge=1)
    max_page_size: int = Field(default=100, ge=1)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
