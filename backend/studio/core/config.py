import os
from typing import Optional

from pydantic_settings import BaseSettings

from dotenv import load_dotenv
load_dotenv()


class Settings(BaseSettings):
    PROJECT_NAME: str = "Creative Studio API"
    API_PREFIX: str = "/api"

    # For local dev you can use sqlite:
    # SQLALCHEMY_DATABASE_URI: str = "sqlite:///./studio.db"
    SQLALCHEMY_DATABASE_URI: str = os.getenv(
        "DATABASE_URL", "sqlite:///./studio.db"
    )
    REDIS_URL: str = "redis://localhost:6379"

    MEDIA_ROOT: str = "media"
    PUBLIC_BASE_URL: str = "http://localhost:8000"

    FAL_KEY: Optional[str] = None
    GEMINI_API_KEY: Optional[str] = None
    REPLICATE_API_TOKEN: Optional[str] = None

    GEMINI_FLASH_MODEL: str = "gemini-2.0-flash"
    GEMINI_PRO_MODEL: str = "gemini-2.5-pro"

    # Stands in for the authenticated user when no X-User-Id header is sent
    DEV_USER_ID: str = "00000000-0000-0000-0000-000000000000"

    LOG_LEVEL: str = "INFO"

    POLL_INTERVAL_SECONDS: float = 2.0
    POLL_MAX_ATTEMPTS: int = 150

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
