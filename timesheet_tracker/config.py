from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./timesheets.db"
    db_echo: bool = False

    # Application
    app_env: str = "development"
    log_level: str = "INFO"
    logs_dir: str = "logs"
    # Log files older than this are removed by the daily cleanup job
    log_retention_days: int = 30
    # IANA zone used to decide what "today" means for stats
    app_timezone: str = "UTC"
    # Comma-separated list, "*" allows everything
    cors_origins: str = "*"

    # Timesheets
    timesheet_history_limit: int = 30
    stats_window_days: int = 7

    # Scheduler
    scheduler_enabled: bool = True
    # Nightly repair recomputes draft timesheets dated within this many days
    repair_lookback_days: int = 7

    class Config:
        env_file = ".env"
        case_sensitive = False

    def get_cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
