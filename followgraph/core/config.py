# followgraph/core/config.py
"""Application settings loaded from environment variables."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the follow service."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Follow Service"
    LOG_LEVEL: str = "INFO"
    API_LOG_PATH: str = ""

    # Database
    DATABASE_URL: str = "sqlite:///./followgraph.db"
    SQL_ECHO: bool = False

    # Cache
    CACHE_BACKEND: str = "memory"  # 'memory' or 'redis'
    REDIS_URL: str = "redis://localhost:6379/0"
    FOLLOW_CACHE_TTL: int = 3600  # 0 disables expiry
    FOLLOW_CACHE_PREFIX: str = "bp_follow"

    # Links used by notification formatting
    SITE_URL: str = "http://localhost:8000"
    MEMBERS_SLUG: str = "members"
    FOLLOWERS_SLUG: str = "followers"
    NOTIFICATIONS_SLUG: str = "notifications"
    NOTIFICATIONS_ACTIVE: bool = True


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()


settings = get_settings()
