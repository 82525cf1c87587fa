from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Article Management API"
    app_version: str = "1.0.0"
    app_env: str = "development"
    port: int = 3000
    cors_origins: list[str] = ["*"]

    # Database connection: a full URL, or the individual parts
    database_url: str | None = None
    db_driver: str = "postgresql+asyncpg"
    db_host: str | None = None
    db_user: str | None = None
    db_password: str | None = None
    db_database: str | None = None
    db_port: int = 5432
    db_pool_size: int = 10
    db_echo: bool = False
    db_auto_migrate: bool = False

    # Shared secret expected in the x-api-key header
    api_key_secret: str | None = None

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine / drivers
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_requests: str = "INFO"         # inbound request logging

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance, reads .env once."""
    return Settings()
