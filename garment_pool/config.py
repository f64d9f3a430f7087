"""
Application configuration.

All configuration is loaded from environment variables.
Never hardcode secrets or connection strings in code.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


def _split_list(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Garment Pool"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "postgresql://localhost:5432/garment_pool"
    )

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Access. Empty means every call is authorized.
    API_KEY: str = os.getenv("API_KEY", "")

    # Audit log
    LOG_PAGE_SIZE: int = int(os.getenv("LOG_PAGE_SIZE", "40"))
    LOG_RETENTION_WEEKS: int = int(os.getenv("LOG_RETENTION_WEEKS", "10"))
    STALE_AFTER_WEEKS: int = int(os.getenv("STALE_AFTER_WEEKS", "6"))
    TIMESTAMP_FORMAT: str = os.getenv("TIMESTAMP_FORMAT", "%d.%m.%Y %H:%M")

    # Outbound mail
    SMTP_HOST: str = os.getenv("SMTP_HOST", "")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USERNAME: str = os.getenv("SMTP_USERNAME", "")
    SMTP_PASSWORD: str = os.getenv("SMTP_PASSWORD", "")
    SMTP_USE_SSL: bool = os.getenv("SMTP_USE_SSL", "false").lower() == "true"
    SMTP_TIMEOUT: float = float(os.getenv("SMTP_TIMEOUT", "10"))
    MAIL_SENDER: str = os.getenv("MAIL_SENDER", "garment-pool@localhost")
    NOTIFY_RECIPIENTS: list[str] = _split_list(
        os.getenv("NOTIFY_RECIPIENTS", "")
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    The Settings object is created once and reused for all
    subsequent calls.
    """
    return Settings()
