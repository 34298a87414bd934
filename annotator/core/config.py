"""Application configuration using Pydantic Settings."""

import os
from typing import List, Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    # Service Identity
    SERVICE_NAME: str = "image-annotation-api"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"  # development, staging, production

    # Logging Configuration
    LOG_LEVEL: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    LOG_JSON: bool = True    # JSON logs (prod) vs pretty console (dev)
    DEBUG: bool = False      # Enable debug mode features

    # Store Backend Configuration
    STORE_BACKEND: str = "memory"  # Options: "memory" or "sqlite"
    DATABASE_PATH: Optional[str] = os.path.join(os.getcwd(), "annotations.db")

    # Uploaded files, served statically under UPLOAD_URL_PREFIX
    UPLOAD_DIR: str = os.path.join(os.getcwd(), "uploads")
    UPLOAD_URL_PREFIX: str = "/uploads"

    # Upload Constraints
    MAX_UPLOAD_SIZE_MB: int = 10
    MAX_FILES_PER_UPLOAD: int = 10
    ALLOWED_MIME_PREFIX: str = "image/"

    # Comments
    ENFORCE_SINGLE_COMMENT: bool = False  # one comment per (user, image)

    # CSV export language: "zh" or "en"
    EXPORT_LOCALE: str = "zh"

    # Security
    PASSWORD_HASH_SCHEME: str = "pbkdf2_sha256"

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:5173"]

    @field_validator('STORE_BACKEND')
    @classmethod
    def validate_store_backend(cls, v: str) -> str:
        """Only the in-memory and SQLite stores exist."""
        if v not in ("memory", "sqlite"):
            raise ValueError(f"STORE_BACKEND must be 'memory' or 'sqlite', got '{v}'")
        return v

    @field_validator('EXPORT_LOCALE')
    @classmethod
    def validate_export_locale(cls, v: str) -> str:
        """Ensure an export label table exists for the locale."""
        if v not in ("zh", "en"):
            raise ValueError(f"EXPORT_LOCALE must be 'zh' or 'en', got '{v}'")
        return v

    @field_validator('MAX_UPLOAD_SIZE_MB', 'MAX_FILES_PER_UPLOAD')
    @classmethod
    def validate_limit(cls, v: int) -> int:
        """Ensure upload limits are positive."""
        if v <= 0:
            raise ValueError(f"Upload limit must be positive, got {v}")
        return v

    @field_validator('UPLOAD_URL_PREFIX')
    @classmethod
    def validate_url_prefix(cls, v: str) -> str:
        """Normalize to a single leading slash and no trailing slash."""
        v = "/" + v.strip().strip("/")
        if v == "/":
            raise ValueError("UPLOAD_URL_PREFIX cannot be the site root")
        return v

    @model_validator(mode='after')
    def validate_sqlite_configuration(self):
        """Ensure the SQLite backend has somewhere to write."""
        if self.STORE_BACKEND == "sqlite" and not self.DATABASE_PATH:
            raise ValueError("DATABASE_PATH must be set when STORE_BACKEND=sqlite")
        return self

    @property
    def max_upload_size_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def database_url(self) -> str:
        return f"sqlite+aiosqlite:///{self.DATABASE_PATH}"

    @property
    def is_debug_mode(self) -> bool:
        """Check if application is in debug mode."""
        return self.DEBUG or self.LOG_LEVEL.upper() == "DEBUG"

    @property
    def use_json_logs(self) -> bool:
        """Determine if JSON logging should be used.

        In production, always use JSON logs.
        In development, allow override via LOG_JSON setting.
        """
        if self.ENVIRONMENT == "production":
            return True
        if self.DEBUG:
            return self.LOG_JSON
        return True


# Global settings instance
settings = Settings()
