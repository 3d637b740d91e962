# admin_console/config.py
from functools import lru_cache
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Console settings loaded from the environment (or a local .env file).

      - ADMIN_PASSWORD: shared secret for the login gate
      - API_BASE: base URL of the catalog store and image host
      - SESSION_FILE: where the "authenticated" marker is kept
      - LOG_LEVEL: console log level

    The defaults are meant for local development against the in-memory store.
    """

    ADMIN_PASSWORD: str = "admin123"
    API_BASE: str = "http://localhost:4000"
    SESSION_FILE: Path = Path.home() / ".catalog-admin" / "session.json"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
