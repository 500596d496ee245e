"""Portcullis: Configuration via pydantic-settings."""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "Portcullis"
    APP_VERSION: str = "1.0.0"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./portcullis.db"
    DATABASE_ECHO: bool = False

    # Security
    SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_HOURS: int = 24
    JWT_ISSUER: str = "portcullis"
    JWT_AUDIENCE: str = "portcullis-clients"
    BCRYPT_ROUNDS: int = 12

    # Invitations
    INVITATION_EXPIRY_DAYS: int = 7
    BOOTSTRAP_INVITATION_EXPIRY_DAYS: int = 1

    # Password reset
    RESET_CODE_EXPIRY_MINUTES: int = 15
    EXPOSE_RESET_CODE: bool = False  # only without a delivery channel, never in production

    # Seeded role names
    SUPER_ADMIN_ROLE_NAME: str = "Super Admin"
    DEFAULT_ROLE_NAME: str = "Normal User"

    # Scheduler
    SCHEDULER_ENABLED: bool = True
    CLEANUP_INTERVAL_MINUTES: int = 60
    TIMEZONE: str = "UTC"

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @model_validator(mode="after")
    def _reset_code_never_exposed_in_production(self) -> "Settings":
        if self.EXPOSE_RESET_CODE and self.ENVIRONMENT == "production":
            raise ValueError("EXPOSE_RESET_CODE cannot be enabled in production")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
