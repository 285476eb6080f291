from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings

_PROJECT_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _PROJECT_DIR / ".env",
    ".env",
)

RemoteBackend = Literal["none", "database", "postgrest"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Atelier API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["http://localhost:5173"]

    # Local snapshot (the durable source of truth)
    snapshot_path: str = "data/app_data.json"

    # Remote mirror: "none" keeps everything local
    remote_backend: RemoteBackend = "none"
    database_url: str = "sqlite:///data/remote.db"
    postgrest_url: str = ""
    postgrest_api_key: str = ""
    postgrest_extended_columns: bool = False   # remote tables carry discount_reason / custom_price

    # Sync behaviour
    sync_timeout_ms: int = 3000
    sync_retry_queue_size: int = 100     # 0 disables the retry queue

    # Seed values for a fresh snapshot
    default_brand_name: str = "Lala accesorios"
    default_margin_percent: float = 50.0

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine SQL queries
    log_level_http: str = "WARNING"          # httpx / httpcore outbound HTTP
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_sync: str = "INFO"             # SyncEngine stages

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
