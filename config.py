"""
Configuration management for CareTrack
"""

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "CareTrack"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENV: str = "development"

    # API
    API_PREFIX: str = "/api/v1"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database
    DATABASE_URL: str = "sqlite:///./caretrack.db"
    DATABASE_ECHO: bool = False

    # Local timezone used to decide what "today" means for stats and upcoming doses
    TIMEZONE: Optional[str] = None

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


class CareConfig:
    """Domain defaults for medication tracking"""

    # Inventory
    DEFAULT_REORDER_THRESHOLD: int = 5
    DEFAULT_DAYS_TO_REORDER: int = 7
    MIN_DAYS_TO_REORDER: int = 1
    MAX_DAYS_TO_REORDER: int = 30

    # Upcoming feed: today plus this many following days
    UPCOMING_LOOKAHEAD_DAYS: int = 1
    APPOINTMENT_LOOKAHEAD_DAYS: int = 7
    APPOINTMENT_LIMIT: int = 5

    # Daily stats
    MEAL_TYPES: list[str] = ["breakfast", "lunch", "dinner"]
    RECENT_LOG_LIMIT: int = 10

    # Daily inspiration fallback
    DEFAULT_INSPIRATION_MESSAGE: str = (
        "Caregiving often calls us to lean into love we didn't know possible."
    )
    DEFAULT_INSPIRATION_AUTHOR: str = "Tia Walker"


settings = get_settings()
care_config = CareConfig()
