"""Configuration and environment settings for Budgetbook."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings for Budgetbook."""

    database_url: str = "sqlite:///budgetbook.db"
    server_host: str = "127.0.0.1"
    server_port: int = 8000
    default_currency: str = "ILS"
    transactions_limit: int = 100
    recent_transactions_limit: int = 10
    log_level: str = "INFO"
    log_file: str = "logs/budgetbook.log"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


def get_settings() -> "Settings":
    """Return an instance of the application settings."""
    return Settings()
