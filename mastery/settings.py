from __future__ import annotations

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DB_PATH = os.path.join(os.path.dirname(__file__), "..", "self_mastery.db")


class Settings(BaseSettings):
    database_url: str = Field(f"sqlite:///{DB_PATH}", alias="DATABASE_URL")
    log_level: str = Field("INFO", alias="MASTERY_LOG_LEVEL")
    backend_session_secret: str | None = Field(None, alias="BACKEND_SESSION_SECRET")

    streak_threshold: float = Field(0.8, alias="STREAK_THRESHOLD")
    ranking_window_days: int = Field(14, alias="RANKING_WINDOW_DAYS")
    trend_window_days: int = Field(30, alias="TREND_WINDOW_DAYS")
    week_starts_on: int = Field(0, alias="WEEK_STARTS_ON")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None
