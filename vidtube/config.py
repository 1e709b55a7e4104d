# ============================================================================
# FILE: vidtube/config.py
# ============================================================================
from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    """Application configuration using Pydantic BaseSettings"""

    # App settings
    APP_NAME: str = "VidTube"
    DEBUG: bool = False
    API_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./vidtube.db"  # Change to PostgreSQL in production

    # Redis cache (leave empty to disable caching)
    REDIS_URL: Optional[str] = None
    CACHE_EXPIRE_SECONDS: int = 300

    # Security
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_SECRET: str = "change-this-access-secret-in-production"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_SECRET: str = "change-this-refresh-secret-in-production"
    REFRESH_TOKEN_EXPIRE_DAYS: int = 10
    COOKIE_SECURE: bool = True

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Asset store (Cloudinary)
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""
    ASSET_STORE_TIMEOUT: float = 60.0
    UPLOAD_TEMP_DIR: str = "./public/temp"

    # Pagination
    DEFAULT_PAGE_LIMIT: int = 10
    MAX_PAGE_LIMIT: int = 100

    class Config:
        env_file = ".env"
        case_sensitive = True
