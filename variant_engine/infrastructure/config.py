"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Engine settings loaded from ``VARIANT_ENGINE_*`` environment variables."""

    # Generation
    combination_warning_threshold: int = 100

    # GS1 barcode registry
    gs1_base_url: str = "http://catalog-api:8000"
    gs1_timeout_seconds: float = 10.0
    gs1_debounce_seconds: float = 1.0
    gs1_api_token: str | None = None

    # Attribute catalog
    catalog_base_url: str = "http://catalog-api:8000"
    catalog_timeout_seconds: float = 10.0
    catalog_api_token: str | None = None

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    model_config = {
        "env_prefix": "VARIANT_ENGINE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
