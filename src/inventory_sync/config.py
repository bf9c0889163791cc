"""Configuration management using pydantic-settings."""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Local credential store
    database_path: str = Field(
        default="inventoryflow.db",
        description="Path to the SQLite settings database",
    )
    encryption_secret: str = Field(
        default="",
        validation_alias=AliasChoices("INVENTORYFLOW_SECRET", "encryption_secret"),
        description="Seed for the token encryption key; a fixed fallback is used when empty",
    )

    # Shopify Admin GraphQL API
    shopify_api_version: str = Field(
        default="2024-01",
        description="Shopify Admin API version",
    )
    shopify_page_size: int = Field(
        default=50,
        ge=1,
        le=250,
        description="Products requested per page",
    )
    shopify_variants_per_product: int = Field(
        default=100,
        ge=1,
        le=250,
        description="Variants requested per product",
    )
    shopify_locations_per_item: int = Field(
        default=10,
        ge=1,
        le=250,
        description="Stock locations summed per inventory item",
    )
    request_timeout: float = Field(
        default=30.0,
        description="HTTP request timeout in seconds",
    )
    connect_timeout: float = Field(
        default=30.0,
        description="HTTP connection timeout in seconds",
    )

    # Login gate
    max_pin_attempts: int = Field(
        default=5,
        ge=1,
        description="Failed PIN attempts allowed before the gate locks",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_json: bool = Field(
        default=False,
        description="Enable JSON structured logging",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
