"""Application settings, read from TASKMANAGER_* environment variables or .env."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TASKMANAGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_path: Path = BASE_DIR / "tasks.db"
    log_level: str = "INFO"
    log_file: Path | None = None
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
