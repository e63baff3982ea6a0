"""
Configuration and settings for the portfolio service.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_prefix="PORTFOLIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_prefix: str = Field(default="/api")
    log_level: str = Field(default="INFO")
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:5173"])
    site_url: str = Field(default="http://localhost:5173")

    # Database (Postgres expected, any SQLAlchemy URL works)
    database_url: Optional[str] = Field(default=None)

    # S3-compatible object storage
    storage_endpoint: Optional[str] = Field(default=None)
    storage_region: Optional[str] = Field(default=None)
    storage_access_key: Optional[str] = Field(default=None)
    storage_secret_key: Optional[str] = Field(default=None)
    storage_public_url: Optional[str] = Field(default=None)

    # Local fallback used when the backend is not configured
    local_store_path: str = Field(default="data/local_store.json")
    static_dir: str = Field(default="static")
    resume_file_name: str = Field(default="resume.pdf")

    # Admin auth
    admin_email: str = Field(default="admin@portfolio.dev")
    admin_password_hash: Optional[str] = Field(default=None)
    jwt_secret: Optional[str] = Field(default=None)
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=60 * 12)

    @property
    def backend_configured(self) -> bool:
        # Both the service URL and the access key are required.
        return bool(self.database_url and self.storage_access_key)

    @property
    def static_resume_path(self) -> str:
        return f"/assets/{self.resume_file_name}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
