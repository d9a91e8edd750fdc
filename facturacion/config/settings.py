"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "facturacion.db"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class UploadSettings(BaseSettings):
    """Invoice attachment storage configuration."""

    model_config = SettingsConfigDict(env_prefix="UPLOADS_")

    dir: Path = Path("uploads")
    base_url: str = "http://localhost:8000/uploads"
    mount_path: str = "/uploads"

    max_size: int = 10 * 1024 * 1024  # 10 MB
    allowed_extensions: list[str] = [".pdf", ".png", ".jpg", ".jpeg"]

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("allowed_extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        # ".PDF", "pdf" and ".pdf" are the same extension
        return [ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in v]


DEFAULT_JWT_SECRET = "change-me-in-production"


class AuthSettings(BaseSettings):
    """Bearer token verification."""

    model_config = SettingsConfigDict(env_prefix="AUTH_")

    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Facturacion"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    uploads: UploadSettings = Field(default_factory=UploadSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    api: APISettings = Field(default_factory=APISettings)

    @model_validator(mode="after")
    def check_environment(self) -> "Settings":
        if self.environment == "production" and self.auth.jwt_secret == DEFAULT_JWT_SECRET:
            raise ValueError("AUTH_JWT_SECRET must be set in production")
        self.storage.data_dir.mkdir(parents=True, exist_ok=True)
        return self


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
