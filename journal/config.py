"""Application configuration via environment variables."""

from pathlib import Path
from pydantic_settings import BaseSettings

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    database_url: str = f"sqlite:///{PROJECT_ROOT / 'journal.db'}"
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:3000"]  # Dashboard dev server

    # Auth
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440  # 24 hours

    # Trade listing
    default_page_size: int = 10
    max_page_size: int = 100
    recent_trades_limit: int = 5

    model_config = {"env_prefix": "TJ_", "env_file": ".env"}


settings = Settings()
