"""
Configuration settings for the AstroTasks service.
Values come from environment variables or a ``.env`` file.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "AstroTasks"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # Database
    DB_NAME: str = Field(default="new_employee_db", validation_alias="DB_NAME")
    DATA_DIR: Path = Field(default=Path("data"), validation_alias="DATA_DIR")
    DB_POOL_SIZE: int = Field(default=5, validation_alias="DB_POOL_SIZE")
    DB_POOL_TIMEOUT: float = Field(default=30.0, validation_alias="DB_POOL_TIMEOUT")
    DB_INIT_RETRIES: int = Field(default=5, validation_alias="DB_INIT_RETRIES")
    DB_INIT_RETRY_DELAY: float = Field(default=5.0, validation_alias="DB_INIT_RETRY_DELAY")

    # Uploads
    MAX_UPLOAD_BYTES: int = Field(default=5 * 1024 * 1024, validation_alias="MAX_UPLOAD_BYTES")

    # HTTP server
    HOST: str = Field(default="0.0.0.0", validation_alias="HOST")
    PORT: int = Field(default=3051, validation_alias="PORT")
    STATIC_DIR: Path = Field(default=Path("public"), validation_alias="STATIC_DIR")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    @property
    def database_path(self) -> Path:
        return self.DATA_DIR / f"{self.DB_NAME}.db"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
