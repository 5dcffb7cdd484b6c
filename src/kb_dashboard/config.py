"""Dashboard configuration loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings for the knowledge-base backend and logging."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    KB_API_BASE_URL: str = "http://localhost:8000"
    KB_API_TOKEN: str | None = None
    KB_STATS_PATH: str = "/kb-data"
    KB_GRAPH_PATH: str = "/graph-data"
    KB_UPLOAD_PATH: str = "/upload"
    KB_REQUEST_TIMEOUT_SECONDS: float = 30.0
    KB_UPLOAD_TIMEOUT_SECONDS: float = 300.0
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()
