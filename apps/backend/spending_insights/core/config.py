from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


class Settings(BaseSettings):
    APP_NAME: str = "Spending Insights Backend"
    ENV: str = "dev"

    # apps/backend/db.sqlite3 as an absolute path so the working directory does not matter
    _default_db_path = Path(__file__).resolve().parents[2] / "db.sqlite3"
    DATABASE_URL: str = f"sqlite:///{_default_db_path}"

    CORS_ORIGINS: list[str] = ["*"]
    TIMEZONE: str = "UTC"
    LOG_LEVEL: str = "INFO"

    DEFAULT_SUMMARY_PERIOD: str = "weekly"
    DEFAULT_MERCHANT_LIMIT: int = 10
    MAX_MERCHANT_LIMIT: int = 100
    DEFAULT_TREND_PERIODS: int = 12
    # upper bound on buckets per window; larger ranges are rejected
    MAX_BUCKETS: int = 10000

    # percentages
    TREND_DIRECTION_THRESHOLD: float = 5.0
    TREND_SIGNIFICANCE_THRESHOLD: float = 10.0

    DASHBOARD_WORKERS: int = 4

    model_config = SettingsConfigDict(env_file=(".env",), env_prefix="INSIGHTS_", case_sensitive=False)


settings = Settings()
