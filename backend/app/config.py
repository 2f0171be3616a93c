"""Application configuration from environment variables."""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Database
    database_url: str = "sqlite:///./blackstar.db"

    # Blob storage (local filesystem adapter)
    storage_root: str = "./storage"
    media_url_prefix: str = "/media"

    # Submission rules
    min_lead_days: int = 10        # Earliest release date = today + N days
    cover_dimension: int = 3000    # Cover must be exactly N x N pixels

    # Permanent deletion
    delete_retries: int = 3

    # Download log user when none is supplied
    download_user: str = "Admin"

    # API
    cors_origins: str = "*"

    # Logging
    log_level: str = "info"
    log_path: str = ""

    class Config:
        env_file = (".env", "../.env")  # Check both backend/ and parent dir
        env_prefix = "BLACKSTAR_"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
