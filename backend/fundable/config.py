from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root holds the .env file (backend/fundable/config.py -> project root)
PROJECT_ROOT = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    # Database Configuration
    database_url: str = "sqlite+aiosqlite:///./fundable.db"
    db_echo: bool = False

    # SEC EDGAR
    edgar_base_url: str = "https://data.sec.gov/"
    edgar_user_agent: str = "Fundable Amounts Service admin@fundable.local"
    edgar_timeout_seconds: float = 15.0

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Provides a cached singleton instance of the Settings."""
    return Settings()


settings = get_settings()
