"""Application configuration managed via environment variables."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "StudyPace Core"
    debug: bool = False
    log_level: str = "INFO"
    database_url: str = "postgresql+psycopg2://studypace@localhost:5432/studypace"
    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "studypace"
    scheduler_enabled: bool = False
    scheduler_timezone: str = "UTC"
    sync_drain_interval_seconds: int = 60
    sync_drain_on_startup: bool = True
    sync_storage_dir: str = ".studypace"
    sync_queue_key: str = "offline_queue"
    sync_max_retries: int = 5
    notifications_enabled: bool = True
    notifications_provider: str = "noop"
    smart_today_max_suggestions: int = 8
    missed_tasks_limit: int = 10


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
