"""Application configuration."""

import os
import tempfile
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


def _default_staging_dir() -> Path:
    return Path(tempfile.gettempdir()) / "borobudur-staging"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str | None = None
    supabase_service_key: str | None = None
    storage_bucket: str = "captures"
    ledger_table: str = "capture_sessions"
    remote_timeout_seconds: float = Field(default=5.0, gt=0)
    list_page_size: int = Field(default=100, ge=1, le=1000)
    staging_dir: Path = Field(default_factory=_default_staging_dir)
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
