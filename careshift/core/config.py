"""
Application configuration using Pydantic Settings
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Application
    APP_NAME: str = "CareShift"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # API
    API_V1_PREFIX: str = "/api/v1"
    ALLOWED_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Database
    DATABASE_URL: str = "sqlite:///./careshift.db"

    # Identity provider tokens
    JWT_SECRET_KEY: str = "jwt-secret-key-change-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 24 hours

    # Geofence
    GEOFENCE_NOTIFICATION_SECONDS: int = 5
    GEOLOCATION_TIMEOUT_SECONDS: float = 10.0

    # Fallback position when the device cannot report one
    DEFAULT_LATITUDE: float = 40.7901
    DEFAULT_LONGITUDE: float = -73.9533
    DEFAULT_ACCURACY_METERS: float = 100.0


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
