from typing import List, Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorefrontSettings(BaseSettings):
    """Storefront service configuration settings.

    Every field can be overridden with a ``STOREFRONT__<FIELD>`` environment variable.
    """

    # Service URL
    URL: str = "http://localhost:8080"

    # Database
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB: str = "storefront"

    # Auth / JWT
    JWT_SECRET: SecretStr = SecretStr("dev-secret-key-change-me-in-production")
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_IN: int = 7 * 24 * 60 * 60  # seconds

    # Catalog
    PHOTO_MAX_BYTES: int = 1_000_000
    PRODUCTS_PER_PAGE: int = 6
    RECENT_PRODUCTS_LIMIT: int = 12
    RELATED_PRODUCTS_LIMIT: int = 3

    # Misc
    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    LOG_DIR: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT__",
        env_file=".env",
        extra="ignore",
    )


_settings: Optional[StorefrontSettings] = None


def get_settings() -> StorefrontSettings:
    """Load cached settings with STOREFRONT__ env override support."""
    global _settings
    if _settings is None:
        _settings = StorefrontSettings()
    return _settings


def reset_settings() -> None:
    """Reset settings cache (useful in tests)."""
    global _settings
    _settings = None
