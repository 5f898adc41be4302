from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
from pathlib import Path
import logging
import urllib.parse

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    PROJECT_NAME: str = "Shop Admin API"
    PROJECT_VERSION: str = "1.0.0"
    API_STR: str = "/api"
    SERVER_HOST: str = "http://localhost:8000"
    LOG_LEVEL: str = "INFO"

    # Database
    POSTGRES_SERVER: Optional[str] = "localhost"
    POSTGRES_USER: Optional[str] = "shop_admin"
    POSTGRES_PASSWORD: Optional[str] = "securepassword123" # Default, should be overridden by .env
    POSTGRES_DB: Optional[str] = "shop_admin_db"
    POSTGRES_PORT: int = 5432
    DATABASE_URL: Optional[str] = None # Will be constructed

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    # --- SECURITY SETTINGS ---
    SECRET_KEY: str = "dev-secret" # CHANGE THIS IN .ENV
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7 # 7 days
    PASSWORD_RESET_EXPIRE_MINUTES: int = 60
    OTP_EXPIRE_MINUTES: int = 10
    OTP_MAX_ATTEMPTS: int = 3

    # --- Asset store ---
    # "cloudinary" uploads to Cloudinary, "local" writes under static/uploads
    ASSET_STORE_BACKEND: str = "cloudinary"
    CLOUDINARY_URL: Optional[str] = None # cloudinary://<api_key>:<api_secret>@<cloud_name>
    ASSET_NAMESPACE: str = "admin-panel/products"
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024
    IMAGE_MAX_WIDTH: int = 800
    IMAGE_MAX_HEIGHT: int = 800
    UPLOAD_CACHE_TTL_SECONDS: float = 30.0
    UPLOAD_CACHE_SWEEP_INTERVAL_SECONDS: float = 5 * 60.0

    # --- Email (Resend) ---
    RESEND_API_KEY: Optional[str] = None
    EMAIL_FROM: str = "Royal Thread Admin <no-reply@royalthread.com>"
    FRONTEND_URL: str = "http://localhost:5173"

    model_config = SettingsConfigDict(
        # backend/shop_admin/core/config.py -> project root
        env_file=Path(__file__).resolve().parent.parent.parent.parent / ".env",
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=True
    )

settings = Settings()

# Construct DATABASE_URL after settings are loaded, unless given explicitly
if not settings.DATABASE_URL:
    if settings.POSTGRES_USER and settings.POSTGRES_PASSWORD and \
       settings.POSTGRES_SERVER and settings.POSTGRES_DB and settings.POSTGRES_PORT:
        encoded_password = urllib.parse.quote_plus(settings.POSTGRES_PASSWORD)
        settings.DATABASE_URL = (
            f"postgresql+asyncpg://{settings.POSTGRES_USER}:{encoded_password}@"
            f"{settings.POSTGRES_SERVER}:{settings.POSTGRES_PORT}/{settings.POSTGRES_DB}"
        )
    else:
        logger.warning("Database URL could not be constructed. Check POSTGRES environment variables in .env and config defaults.")

if settings.ASSET_STORE_BACKEND == "cloudinary" and not settings.CLOUDINARY_URL:
    logger.warning("CLOUDINARY_URL is not set. Image uploads to Cloudinary will fail.")
