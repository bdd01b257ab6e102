"""
config/settings.py
──────────────────
Centralised settings loaded from .env via pydantic-settings.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Server
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"

    # Search
    similarity_threshold: float = Field(default=0.75, ge=-1.0, le=1.0)
    embedding_dim: int = Field(default=512, ge=1)
    search_workers: int = Field(default=4, ge=0)

    # Training set preparation
    training_sample_size: int | None = 2000

    # Logging
    log_level: str = "INFO"
    log_file: Path = Path("./logs/app.log")


@lru_cache
def get_settings() -> Settings:
    return Settings()
