from __future__ import annotations

from functools import lru_cache

from dotenv import find_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library configuration loaded from ``TRADING_SESSIONS_*`` environment variables."""

    log_level: str = Field(default="INFO", description="Logging level: DEBUG/INFO/WARN/ERROR")

    # Columnar annotation
    time_column: str = Field(default="time", description="Column holding Unix timestamps in seconds")
    session_column: str = Field(default="Session", description="Column receiving session labels")

    model_config = SettingsConfigDict(
        env_file=find_dotenv(usecwd=True) or None,
        env_prefix="TRADING_SESSIONS_",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
