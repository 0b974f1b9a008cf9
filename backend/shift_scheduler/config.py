import logging
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Shift Scheduler"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    database_url: str = "postgresql+asyncpg://shift_scheduler:shift_scheduler@db:5432/shift_scheduler"
    database_pool_size: int = 5
    database_max_overflow: int = 10
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:8000"]
    log_level: str = "INFO"

    # Scheduling rules. "Today" is evaluated in this timezone.
    timezone: str = "Asia/Taipei"
    min_shifts_per_month: int = 6
    max_shifts_per_month: int = 15
    max_employees_per_day: int = 2

    # Holiday feed; {year} is substituted per request.
    holiday_api_url: str = "https://allen0099.github.io/taiwan-calendar/{year}/all.json"
    holiday_api_timeout_seconds: float = 10.0
    holiday_api_user_agent: str = "shift-scheduler/0.1 (+httpx)"

    worker_interval_seconds: int = 86400


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def configure_logging(settings: Settings) -> None:
    """Configure root logging for the API and worker processes."""
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)
