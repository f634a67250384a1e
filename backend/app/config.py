"""
Application configuration loaded from environment variables.
"""
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Server
    port: int = 8000
    cors_origin: str = "*"
    log_level: str = "INFO"

    # MongoDB
    mongo_uri: str = "mongodb://mongodb:27017"
    mongo_db_name: str = "auth_db"

    # Redis
    redis_host: str = "redis"
    redis_port: int = 6379

    # JWT Configuration
    jwt_algorithm: str = "HS256"
    access_token_secret: str = "CHANGE_ME_ACCESS_TOKEN_SECRET"
    access_token_expire_minutes: int = 60 * 24
    refresh_token_secret: str = "CHANGE_ME_REFRESH_TOKEN_SECRET"
    refresh_token_expire_days: int = 10

    # Auth cookies are always HttpOnly; Secure can be turned off for local http
    cookie_secure: bool = True

    # Rate Limiting
    login_rate_limit_attempts: int = 5
    register_rate_limit_attempts: int = 10
    rate_limit_window_seconds: int = 60

    # Media uploads (Cloudinary)
    upload_temp_dir: str = "./public/temp"
    cloudinary_cloud_name: Optional[str] = None
    cloudinary_api_key: Optional[str] = None
    cloudinary_api_secret: Optional[str] = None
    cloudinary_upload_url: str = "https://api.cloudinary.com/v1_1"

    @property
    def cors_origins(self) -> list[str]:
        """Allowed CORS origins, split from the comma-separated setting."""
        return [o.strip() for o in self.cors_origin.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
