"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False
    API_PREFIX: str = "/api"

    # JSON file backing the record store; created on first start if missing.
    DATABASE_PATH: str = "database.json"
    # Delete DATABASE_PATH before opening (local dev only).
    RESET_DATABASE_ON_START: bool = False

    # JWT signing secret shared by access and refresh tokens (HS256).
    JWT_SECRET: SecretStr = SecretStr("change-me-in-production")
    ACCESS_TOKEN_TTL_SECONDS: int = 3600
    REFRESH_TOKEN_TTL_HOURS: int = 1440

    # API key presented by Polka in "Authorization: ApiKey <key>".
    POLKA_KEY: SecretStr = SecretStr("")

    BCRYPT_ROUNDS: int = 13

    @field_validator("API_PREFIX")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v.startswith("/"):
            raise ValueError("API_PREFIX must start with '/' (e.g. /api)")
        return v

    @field_validator("DATABASE_PATH")
    @classmethod
    def validate_database_path(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("DATABASE_PATH must be set and non-empty")
        return v.strip()

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value() or not v.get_secret_value().strip():
            raise ValueError("JWT_SECRET must be set and non-empty")
        return v

    @field_validator("ACCESS_TOKEN_TTL_SECONDS")
    @classmethod
    def validate_access_ttl(cls, v: int) -> int:
        if v < 1 or v > 86400:
            raise ValueError(
                "ACCESS_TOKEN_TTL_SECONDS must be between 1 and 86400 (1 sec to 24 hours)"
            )
        return v

    @field_validator("REFRESH_TOKEN_TTL_HOURS")
    @classmethod
    def validate_refresh_ttl(cls, v: int) -> int:
        if v < 1 or v > 8760:
            raise ValueError(
                "REFRESH_TOKEN_TTL_HOURS must be between 1 and 8760 (1 hour to 1 year)"
            )
        return v

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        if v < 4 or v > 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return v


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()
