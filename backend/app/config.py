"""
VideoAPI - Application Configuration
"""
from functools import lru_cache
from pathlib import Path
from typing import Dict

from pydantic_settings import BaseSettings

DEFAULT_VIDEO_MIME_TYPES = {
    "video/mp4": ".mp4",
    "video/webm": ".webm",
    "video/x-msvideo": ".avi",
    "video/avi": ".avi",
}

DEFAULT_PICTURE_MIME_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "VideoAPI"
    debug: bool = False

    # Database
    # SQLite for development, PostgreSQL or Oracle for production
    database_url: str = "sqlite+aiosqlite:///./storage/videoapi.db"

    # Authentication
    jwt_secret_key: str = "videoapi-secret-key-change-in-production"
    jwt_expire_minutes: int = 480  # 8 hours
    # password of the built-in "superAdmin" account; empty disables it
    super_password: str = ""
    # created as user "admin" when the users table is empty; empty disables it
    default_admin_password: str = "admin123"
    cookie_secure: bool = False

    # Alertmanager webhook; empty rejects every call
    alertmanager_api_key: str = ""

    # Storage
    storage_path: str = "./storage"
    tmp_path: str = "./storage/tmp"
    # remux uploaded .avi files to .mp4 when set
    ffmpeg_path: str = ""
    video_mime_types: Dict[str, str] = DEFAULT_VIDEO_MIME_TYPES
    picture_mime_types: Dict[str, str] = DEFAULT_PICTURE_MIME_TYPES

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def media_path(self) -> Path:
        return Path(self.storage_path) / "media"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
