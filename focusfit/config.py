from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-wide configuration, read from FOCUSFIT_* environment variables."""

    generation_api_url: str = "https://api.openai.com/v1"
    generation_api_key: Optional[str] = None
    generation_model: str = "gpt-4o-mini"
    generation_timeout_seconds: float = 30.0
    generation_temperature: float = 0.7

    database_url: str = "sqlite:///focusfit.db"

    log_level: str = "INFO"
    app_env: str = "local"

    cors_origins: List[str] = [
        "http://localhost:8081",  # Expo dev server
        "http://localhost:19006",  # Expo web
        "http://127.0.0.1:8081",
    ]

    model_config = SettingsConfigDict(
        env_prefix="FOCUSFIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
